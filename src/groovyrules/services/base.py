"""BaseService — abstract foundation for all groovyrules services.

Every service receives a :class:`Workspace` at construction time. Rule
services own their transaction boundaries via
``self._workspace.transaction()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from groovyrules.domain.errors import GroovyRulesError
from groovyrules.services._helpers import error_result
from groovyrules.services.result import ServiceResult

if TYPE_CHECKING:
    from groovyrules.config.settings import GroovyRulesSettings
    from groovyrules.domain.units import Unit
    from groovyrules.infrastructure.workspace import Workspace, WorkspaceTransaction

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class LibraryService(BaseService):
            def groovy_library(self, name: str, ...) -> ServiceResult:
                with self._workspace.transaction() as txn:
                    ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def _settings(self) -> GroovyRulesSettings:
        return self._workspace.settings

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a plugin hook synchronously.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            getattr(self._workspace.plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook failed for %s", hook_name, exc_info=True)
            warnings.append(f"Plugin hook failed for {hook_name}")

    def _announce(self, units: list[Unit], warnings: list[str]) -> None:
        """Dispatch ``post_declare`` for freshly committed units."""
        for unit in units:
            self._dispatch_event(
                "post_declare",
                {
                    "unit_name": unit.name,
                    "kind": unit.kind.value,
                    "artifacts": [a.path for a in unit.artifacts],
                },
                warnings,
            )

    def _declare(
        self,
        op: str,
        build: Callable[[WorkspaceTransaction, list[str]], Unit],
    ) -> ServiceResult:
        """Run *build* inside a transaction and wrap the outcome.

        *build* receives the open transaction and the warnings list, and
        returns the target unit. Any :class:`GroovyRulesError` rolls the
        whole declaration back.
        """
        warnings: list[str] = []
        try:
            with self._workspace.transaction() as txn:
                unit = build(txn, warnings)
        except GroovyRulesError as exc:
            logger.debug("%s rejected: %s", op, exc.message)
            return error_result(op, exc, warnings=warnings)

        self._announce(txn.units, warnings)
        generated = [u.name for u in txn.units if u.name != unit.name]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "target": unit.to_dict(),
                "generated": generated,
                "actions": len(txn.actions),
            },
            warnings=warnings,
        )
