"""MacroService — ``spock_test`` and ``groovy_junit_test``.

Both macros take one mixed source list and wire everything a test needs:

1. the framework deps (Spock by default) are added to the caller's deps;
2. sources are classified into Java, Groovy and entry points, where an
   entry point is a Groovy file ending in ``Spec.groovy`` (spock_test) or
   ``Test.groovy`` (groovy_junit_test);
3. Java sources become ``<name>-javalib``; Groovy sources, entry points
   included, become the composite ``<name>-groovylib``;
4. ``groovy_test`` runs the entry points against all of the above.

Missing entry points or an entry point outside the test root fail the
macro before any library is staged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from groovyrules.domain.errors import ConfigurationError
from groovyrules.domain.identity import infer_class_identities
from groovyrules.domain.sources import partition_sources
from groovyrules.services._helpers import dedupe
from groovyrules.services.base import BaseService
from groovyrules.services.library import LibraryService, stage_names
from groovyrules.services.telemetry import traced
from groovyrules.services.testing import TestService

if TYPE_CHECKING:
    from collections.abc import Sequence

    from groovyrules.domain.units import Unit
    from groovyrules.infrastructure.workspace import WorkspaceTransaction
    from groovyrules.services.result import ServiceResult


def javalib_name(name: str) -> str:
    return f"{name}-javalib"


def groovylib_name(name: str) -> str:
    return f"{name}-groovylib"


def generated_names(name: str) -> list[str]:
    """Every intermediate unit a test macro may declare for *name*."""
    groovylib = groovylib_name(name)
    return [javalib_name(name), groovylib, *stage_names(groovylib)]


class MacroService(BaseService):
    """Declares composite test targets from mixed source lists."""

    @traced
    def spock_test(
        self,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        size: str | None = None,
        tags: Sequence[str] = (),
        jvm_flags: Sequence[str] = (),
    ) -> ServiceResult:
        """Test target whose entry points are ``*Spec.groovy`` specifications."""
        suffix = self._settings.languages.spec_suffix
        return self._declare(
            "spock_test",
            lambda txn, warnings: self.declare_test_macro(
                txn,
                name,
                srcs,
                deps,
                entry_suffix=suffix,
                missing_code="NO_SPECS",
                missing_message="No specs found",
                size=size,
                tags=tags,
                jvm_flags=jvm_flags,
                warnings=warnings,
            ),
        )

    @traced
    def groovy_junit_test(
        self,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        size: str | None = None,
        data: Sequence[str] = (),
        resources: Sequence[str] = (),
        jvm_flags: Sequence[str] = (),
        tags: Sequence[str] = (),
    ) -> ServiceResult:
        """Test target whose entry points are ``*Test.groovy`` JUnit classes."""
        suffix = self._settings.languages.test_suffix
        return self._declare(
            "groovy_junit_test",
            lambda txn, warnings: self.declare_test_macro(
                txn,
                name,
                srcs,
                deps,
                entry_suffix=suffix,
                missing_code="NO_TESTS",
                missing_message="No tests found",
                size=size,
                data=data,
                resources=resources,
                tags=tags,
                jvm_flags=jvm_flags,
                warnings=warnings,
            ),
        )

    def declare_test_macro(
        self,
        txn: WorkspaceTransaction,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str],
        *,
        entry_suffix: str,
        missing_code: str,
        missing_message: str,
        size: str | None = None,
        data: Sequence[str] = (),
        resources: Sequence[str] = (),
        tags: Sequence[str] = (),
        jvm_flags: Sequence[str] = (),
        warnings: list[str] | None = None,
    ) -> Unit:
        settings = self._settings
        partition = partition_sources(tuple(srcs), settings.conventions, entry_suffix=entry_suffix)
        if not partition.entry_points:
            raise ConfigurationError(missing_message, code=missing_code, target=name)
        infer_class_identities(
            partition.entry_points,
            settings.layout.test_root,
            extension=settings.languages.scripting_ext,
        )

        framework_deps = dedupe([*deps, *settings.test.framework_deps])
        lib_deps = list(framework_deps)
        test_deps = list(framework_deps)
        libraries = LibraryService(self._workspace)

        if partition.compiled:
            javalib = libraries.declare_java_library(
                txn, javalib_name(name), partition.compiled, framework_deps, testonly=True
            )
            lib_deps.append(javalib.name)
            test_deps.append(javalib.name)

        if partition.scripting:
            groovylib = libraries.declare_groovy_library(
                txn,
                groovylib_name(name),
                partition.scripting,
                lib_deps,
                resources=resources,
                testonly=True,
                warnings=warnings,
            )
            test_deps.append(groovylib.name)

        ignored = [*partition.resources, *partition.unclassified]
        if ignored and warnings is not None:
            warnings.append(f"'{name}': ignoring unrecognized sources: {', '.join(ignored)}")

        return TestService(self._workspace).declare_groovy_test(
            txn,
            name,
            partition.entry_points,
            test_deps,
            data=data,
            jvm_flags=jvm_flags,
            size=size,
            tags=tags,
        )
