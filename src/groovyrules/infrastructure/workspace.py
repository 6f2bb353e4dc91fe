"""Workspace — the build graph plus settings, plugins and execution.

The Workspace is the single dependency injected into every service. Rules
stage the units and actions they generate inside :meth:`transaction`;
they are committed to the build graph only if the whole target (a macro
and every intermediate library it wires) was constructed without error.
A failed declaration therefore schedules zero actions.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from groovyrules.domain.errors import ConfigurationError, MissingInputError
from groovyrules.domain.types import UnitKind
from groovyrules.domain.units import Artifact, Unit
from groovyrules.infrastructure.executor import ActionExecutor
from groovyrules.infrastructure.graph.engine import BuildGraph

if TYPE_CHECKING:
    from collections.abc import Iterator

    from groovyrules.config.settings import GroovyRulesSettings
    from groovyrules.domain.actions import BuildAction
    from groovyrules.infrastructure.executor import CommandRunner
    from groovyrules.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

RAW_FILE_SUFFIXES = (".jar",)


# ---------------------------------------------------------------------------
# WorkspaceTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class WorkspaceTransaction:
    """Staging area for one target's units and actions.

    Lookups see staged units first, then committed ones, so a macro can
    depend on the intermediate libraries it has just declared.
    """

    _workspace: Workspace
    units: list[Unit] = field(default_factory=list)
    actions: list[BuildAction] = field(default_factory=list)

    def add_unit(self, unit: Unit) -> Unit:
        if unit.name in self._workspace.graph or any(u.name == unit.name for u in self.units):
            msg = f"Target '{unit.name}' is already declared"
            raise ConfigurationError(msg, code="DUPLICATE_TARGET", target=unit.name)
        self.units.append(unit)
        return unit

    def add_action(self, action: BuildAction) -> BuildAction:
        self.actions.append(action)
        return action

    def resolve(self, ref: str) -> Unit | Artifact:
        """Resolve a dependency reference to a unit or a raw file.

        References ending in ``.jar`` are raw files relative to the
        workspace root; anything else must name a declared target.
        """
        for unit in reversed(self.units):
            if unit.name == ref:
                return unit
        if ref in self._workspace.graph:
            return self._workspace.graph.get_unit(ref)
        if ref.endswith(RAW_FILE_SUFFIXES):
            return Artifact.source(ref)
        msg = f"Dependency '{ref}' does not name a declared target"
        raise MissingInputError(msg, target=ref)

    def resolve_all(self, refs: list[str] | tuple[str, ...]) -> list[Unit | Artifact]:
        return [self.resolve(ref) for ref in refs]


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


class Workspace:
    """A build workspace rooted at ``settings.workspace_root``."""

    def __init__(
        self,
        settings: GroovyRulesSettings,
        *,
        runner: CommandRunner | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self.settings = settings
        self.root: Path = settings.workspace_root
        self.graph = BuildGraph()
        self._runner = runner
        self._plugins = plugins
        self.loaded = False
        self._register_externals()

    @property
    def output_dir(self) -> str:
        return self.settings.layout.output_dir

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager (entry points discovered lazily on first access)."""
        if self._plugins is None:
            from groovyrules.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load()
        return self._plugins

    def executor(self) -> ActionExecutor:
        return ActionExecutor(self.root, runner=self._runner)

    @contextmanager
    def transaction(self) -> Iterator[WorkspaceTransaction]:
        """Stage declarations and commit them atomically on success."""
        txn = WorkspaceTransaction(_workspace=self)
        yield txn
        staged = self.graph.copy()
        for unit in txn.units:
            staged.add_unit(unit)
        for action in txn.actions:
            staged.add_action(action)
        self.graph = staged
        logger.debug(
            "Committed %d unit(s) and %d action(s)",
            len(txn.units),
            len(txn.actions),
        )

    def _register_externals(self) -> None:
        """Declare every ``[external]`` entry as a pre-built import."""
        for name, jars in sorted(self.settings.external.items()):
            artifacts = tuple(Artifact.source(jar) for jar in jars)
            self.graph.add_unit(
                Unit(
                    name=name,
                    kind=UnitKind.COMPILED_LIBRARY,
                    artifacts=artifacts,
                    runtime_closure=frozenset(artifacts),
                    attrs={"external": True},
                )
            )
