"""LibraryService — Java, Groovy and composite library rules.

``groovy_library`` is the composer: it splits mixed sources by extension,
compiles the Java stage against the declared deps, compiles the Groovy
stage against the declared deps plus the Java jar, jars any resources,
and merges the resulting jars (in that order) into one importable unit.

Groovy may depend on Java, never the reverse: the Java stage is declared
before the Groovy stage exists, so its classpath cannot contain it.

The ``declare_*`` methods stage units into an open transaction and raise
on invalid input; macros compose them. The rule methods open their own
transaction and return ServiceResult.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from groovyrules.domain.actions import compile_action, resource_action
from groovyrules.domain.closure import resolve_closure
from groovyrules.domain.errors import ConfigurationError
from groovyrules.domain.sources import partition_sources
from groovyrules.domain.types import Stage, UnitKind
from groovyrules.domain.units import Artifact, Unit, stage_jar_name, stage_unit_name
from groovyrules.services.base import BaseService
from groovyrules.services.telemetry import traced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from groovyrules.infrastructure.workspace import WorkspaceTransaction
    from groovyrules.services.result import ServiceResult


def stage_names(name: str) -> list[str]:
    """Names of the per-stage units ``groovy_library`` may declare for *name*."""
    return [stage_unit_name(name, stage) for stage in Stage]


class LibraryService(BaseService):
    """Declares library targets."""

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    @traced
    def java_import(
        self,
        name: str,
        jars: Sequence[str],
        *,
        visibility: Sequence[str] = (),
        testonly: bool = False,
    ) -> ServiceResult:
        """Expose pre-built jars as a library."""
        return self._declare(
            "java_import",
            lambda txn, _w: self.declare_java_import(
                txn, name, jars, visibility=visibility, testonly=testonly
            ),
        )

    @traced
    def java_library(
        self,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        resources: Sequence[str] = (),
        visibility: Sequence[str] = (),
        testonly: bool = False,
    ) -> ServiceResult:
        """Compile Java sources into ``lib<name>.jar``, resources into ``lib<name>-res.jar``."""
        return self._declare(
            "java_library",
            lambda txn, _w: self.declare_java_library(
                txn,
                name,
                srcs,
                deps,
                resources=resources,
                visibility=visibility,
                testonly=testonly,
            ),
        )

    @traced
    def groovy_jar(
        self,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
    ) -> ServiceResult:
        """Compile sources with groovyc into ``lib<name>.jar`` (no recorded closure)."""
        return self._declare(
            "groovy_jar",
            lambda txn, _w: self.declare_groovy_jar(txn, name, srcs, deps),
        )

    @traced
    def groovy_library(
        self,
        name: str,
        srcs: Sequence[str] = (),
        deps: Sequence[str] = (),
        *,
        resources: Sequence[str] = (),
        visibility: Sequence[str] = (),
        testonly: bool = False,
    ) -> ServiceResult:
        """Build a composite library from mixed Java/Groovy sources and resources."""
        return self._declare(
            "groovy_library",
            lambda txn, warnings: self.declare_groovy_library(
                txn,
                name,
                srcs,
                deps,
                resources=resources,
                visibility=visibility,
                testonly=testonly,
                warnings=warnings,
            ),
        )

    # ------------------------------------------------------------------
    # Declaration primitives
    # ------------------------------------------------------------------

    def declare_java_import(
        self,
        txn: WorkspaceTransaction,
        name: str,
        jars: Sequence[str],
        *,
        visibility: Sequence[str] = (),
        testonly: bool = False,
    ) -> Unit:
        artifacts = tuple(Artifact.source(jar) for jar in jars)
        return txn.add_unit(
            Unit(
                name=name,
                kind=UnitKind.COMPILED_LIBRARY,
                artifacts=artifacts,
                runtime_closure=frozenset(artifacts),
                visibility=tuple(visibility),
                testonly=testonly,
            )
        )

    def declare_java_library(
        self,
        txn: WorkspaceTransaction,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        resources: Sequence[str] = (),
        visibility: Sequence[str] = (),
        testonly: bool = False,
    ) -> Unit:
        """Stage a javac action and the compiled library it produces.

        *resources* go into a separate ``<name>-res`` jar that ships with
        the library.
        """
        self._require_sources(name, srcs)
        closure = resolve_closure(txn.resolve_all(tuple(deps)))
        jar = Artifact.output(self._workspace.output_dir, stage_jar_name(name))
        toolchain = self._settings.toolchain
        txn.add_action(
            compile_action(
                mnemonic="Javac",
                owner=name,
                compiler=toolchain.javac,
                archiver=toolchain.jar,
                srcs=tuple(srcs),
                closure=closure,
                output=jar.path,
                separator=toolchain.path_separator,
            )
        )
        jars = [jar]
        if resources:
            res = self.declare_resource_library(
                txn, stage_unit_name(name, Stage.RESOURCES), resources, testonly=testonly
            )
            jars.extend(res.artifacts)
        return txn.add_unit(
            Unit(
                name=name,
                kind=UnitKind.COMPILED_LIBRARY,
                deps=tuple(deps),
                artifacts=tuple(jars),
                runtime_closure=closure.artifacts | set(jars),
                visibility=tuple(visibility),
                testonly=testonly,
            )
        )

    def declare_groovy_jar(
        self,
        txn: WorkspaceTransaction,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
    ) -> Unit:
        """Stage a groovyc action.

        The resulting unit exposes only its jar: like a plain file, it
        records no runtime closure of its own.
        """
        self._require_sources(name, srcs)
        closure = resolve_closure(txn.resolve_all(tuple(deps)))
        jar = Artifact.output(self._workspace.output_dir, stage_jar_name(name))
        toolchain = self._settings.toolchain
        txn.add_action(
            compile_action(
                mnemonic="Groovyc",
                owner=name,
                compiler=toolchain.groovyc,
                archiver=toolchain.jar,
                srcs=tuple(srcs),
                closure=closure,
                output=jar.path,
                separator=toolchain.path_separator,
            )
        )
        return txn.add_unit(
            Unit(name=name, kind=UnitKind.RAW_FILES, deps=tuple(deps), artifacts=(jar,))
        )

    def declare_resource_library(
        self,
        txn: WorkspaceTransaction,
        name: str,
        resources: Sequence[str],
        *,
        testonly: bool = False,
    ) -> Unit:
        """Stage a jar holding only *resources*, with resource roots stripped."""
        jar = Artifact.output(self._workspace.output_dir, stage_jar_name(name))
        entries = [(src, self._resource_entry(src)) for src in resources]
        txn.add_action(
            resource_action(
                owner=name,
                archiver=self._settings.toolchain.jar,
                resources=entries,
                output=jar.path,
            )
        )
        return txn.add_unit(
            Unit(
                name=name,
                kind=UnitKind.COMPILED_LIBRARY,
                artifacts=(jar,),
                runtime_closure=frozenset({jar}),
                testonly=testonly,
            )
        )

    def declare_groovy_library(
        self,
        txn: WorkspaceTransaction,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        resources: Sequence[str] = (),
        visibility: Sequence[str] = (),
        testonly: bool = False,
        warnings: list[str] | None = None,
    ) -> Unit:
        """Stage the Java, Groovy and resource stages plus the composite unit.

        Stage units are named ``<name>-java``, ``<name>-groovy`` and
        ``<name>-res``. With no sources and no resources the composite is
        empty, which is valid.
        """
        partition = partition_sources(tuple(srcs), self._settings.conventions)
        ignored = [*partition.resources, *partition.unclassified]
        if ignored and warnings is not None:
            warnings.append(f"'{name}': ignoring unrecognized sources: {', '.join(ignored)}")

        declared_deps = txn.resolve_all(tuple(deps))
        stage_deps = list(deps)
        jars: list[Artifact] = []
        compiled_stage: list[Unit] = []

        if partition.compiled:
            java = self.declare_java_library(
                txn,
                stage_unit_name(name, Stage.JAVA),
                partition.compiled,
                deps,
                testonly=testonly,
            )
            stage_deps.append(java.name)
            compiled_stage.append(java)
            jars.extend(java.artifacts)

        if partition.scripting:
            groovy = self.declare_groovy_jar(
                txn,
                stage_unit_name(name, Stage.GROOVY),
                partition.scripting,
                stage_deps,
            )
            jars.extend(groovy.artifacts)

        if resources:
            res = self.declare_resource_library(
                txn,
                stage_unit_name(name, Stage.RESOURCES),
                resources,
                testonly=testonly,
            )
            jars.extend(res.artifacts)

        closure = resolve_closure([*declared_deps, *compiled_stage]).union(jars)
        return txn.add_unit(
            Unit(
                name=name,
                kind=UnitKind.COMPOSITE_LIBRARY,
                deps=tuple(deps),
                artifacts=tuple(jars),
                runtime_closure=closure.artifacts,
                visibility=tuple(visibility),
                testonly=testonly,
            )
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_sources(name: str, srcs: Sequence[str]) -> None:
        if not srcs:
            msg = f"'{name}' has no sources to compile"
            raise ConfigurationError(msg, code="NO_SOURCES", target=name)

    def _resource_entry(self, path: str) -> str:
        """Path of *path* inside the resource jar."""
        for root in self._settings.layout.resource_roots:
            index = path.find(root)
            if index >= 0:
                return path[index + len(root) :]
        return path
