"""TestService — the ``groovy_test`` rule and its generated script.

Each source must live under the test root and names one JUnit class (or
Spock specification). Class names are inferred before anything is staged,
so an invalid path never schedules an action. The generated script is a
single ``java ... JUnitCore <classes>`` line; the runfiles bundle (closure
plus data files) is recorded on the test unit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from groovyrules.domain.actions import write_file_action
from groovyrules.domain.closure import resolve_closure
from groovyrules.domain.errors import ConfigurationError, GroovyRulesError
from groovyrules.domain.identity import infer_class_identities
from groovyrules.domain.types import UnitKind
from groovyrules.domain.units import Artifact, Unit
from groovyrules.services._helpers import dedupe, error_result
from groovyrules.services.base import BaseService
from groovyrules.services.result import ServiceResult
from groovyrules.services.telemetry import traced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from groovyrules.infrastructure.workspace import WorkspaceTransaction


def render_test_command(
    *,
    java: str,
    jvm_flags: Sequence[str],
    classpath: str,
    runner: str,
    classes: Sequence[str],
) -> str:
    """The one-line body of a test script.

    Examples:
        >>> render_test_command(java="java", jvm_flags=["-Xmx1g"], classpath="a.jar:b.jar",
        ...                     runner="org.junit.runner.JUnitCore", classes=["x.ASpec"])
        'java -Xmx1g -cp a.jar:b.jar org.junit.runner.JUnitCore x.ASpec\\n'
    """
    return " ".join([java, *jvm_flags, "-cp", classpath, runner, *classes]) + "\n"


class TestService(BaseService):
    """Declares test targets that run JUnitCore over inferred classes."""

    __test__ = False

    @traced
    def groovy_test(
        self,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        data: Sequence[str] = (),
        jvm_flags: Sequence[str] = (),
        size: str | None = None,
        tags: Sequence[str] = (),
    ) -> ServiceResult:
        """Generate ``<name>.sh`` running every class in *srcs*.

        *deps* must already contain the compiled test classes.
        """
        return self._declare(
            "groovy_test",
            lambda txn, _w: self.declare_groovy_test(
                txn,
                name,
                srcs,
                deps,
                data=data,
                jvm_flags=jvm_flags,
                size=size,
                tags=tags,
            ),
        )

    def declare_groovy_test(
        self,
        txn: WorkspaceTransaction,
        name: str,
        srcs: Sequence[str],
        deps: Sequence[str] = (),
        *,
        data: Sequence[str] = (),
        jvm_flags: Sequence[str] = (),
        size: str | None = None,
        tags: Sequence[str] = (),
    ) -> Unit:
        settings = self._settings
        if not srcs:
            msg = f"groovy_test '{name}' has no test sources"
            raise ConfigurationError(msg, code="NO_TEST_SOURCES", target=name)
        classes = infer_class_identities(
            tuple(srcs),
            settings.layout.test_root,
            extension=settings.languages.scripting_ext,
        )

        refs = dedupe([*deps, *settings.test.implicit_deps])
        closure = resolve_closure(txn.resolve_all(refs))
        script = Artifact.output(self._workspace.output_dir, f"{name}.sh")
        content = render_test_command(
            java=settings.toolchain.java,
            jvm_flags=jvm_flags,
            classpath=closure.classpath(separator=settings.toolchain.path_separator, short=True),
            runner=settings.test.runner,
            classes=classes,
        )
        txn.add_action(
            write_file_action(
                mnemonic="GroovyTestScript",
                owner=name,
                output=script.path,
                content=content,
                executable=True,
            )
        )
        data_files = {Artifact.source(path) for path in data}
        return txn.add_unit(
            Unit(
                name=name,
                kind=UnitKind.TEST,
                deps=tuple(deps),
                artifacts=(script,),
                runtime_closure=closure.artifacts,
                runfiles=closure.artifacts | data_files,
                testonly=True,
                attrs={
                    "classes": classes,
                    "jvm_flags": list(jvm_flags),
                    "size": size or settings.test.default_size,
                    "tags": list(tags),
                    "data": list(data),
                },
            )
        )

    @traced
    def classnames(self, paths: Sequence[str], *, prefix: str | None = None) -> ServiceResult:
        """Infer the class name each test source path declares."""
        root = prefix if prefix is not None else self._settings.layout.test_root
        try:
            classes = infer_class_identities(
                tuple(paths), root, extension=self._settings.languages.scripting_ext
            )
        except GroovyRulesError as exc:
            return error_result("classname", exc)
        return ServiceResult(
            ok=True,
            op="classname",
            data={
                "prefix": root,
                "count": len(classes),
                "items": [{"id": cls, "path": path} for cls, path in zip(classes, paths, strict=True)],
            },
        )
