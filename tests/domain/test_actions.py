"""Tests for build actions and their builders."""

from pydantic import TypeAdapter

from groovyrules.domain.actions import (
    SCRATCH_SUFFIX,
    ArchiveStep,
    BuildAction,
    CleanupStep,
    CompileStep,
    CopyStep,
    PrepareScratchStep,
    Step,
    compile_action,
    resource_action,
    write_file_action,
)
from groovyrules.domain.closure import DependencyClosure
from groovyrules.domain.types import StepKind
from groovyrules.domain.units import Artifact


def _closure(*paths: str) -> DependencyClosure:
    return DependencyClosure(artifacts=frozenset(Artifact.source(p) for p in paths))


class TestCompileAction:
    def _action(self) -> BuildAction:
        return compile_action(
            mnemonic="Groovyc",
            owner="core-groovy",
            compiler="groovyc",
            archiver="jar",
            srcs=("src/a/Dsl.groovy",),
            closure=_closure("lib/b.jar", "lib/a.jar"),
            output="out/libcore-groovy.jar",
        )

    def test_step_sequence(self) -> None:
        kinds = [step.kind for step in self._action().steps]
        assert kinds == [
            StepKind.PREPARE_SCRATCH,
            StepKind.COMPILE,
            StepKind.ARCHIVE,
            StepKind.CLEANUP,
        ]

    def test_scratch_is_private_to_output(self) -> None:
        action = self._action()
        assert action.scratch_dirs == ["out/libcore-groovy.jar" + SCRATCH_SUFFIX]

    def test_compile_argv(self) -> None:
        step = self._action().compile_step
        assert step is not None
        assert step.argv == (
            "groovyc",
            "-cp",
            "lib/a.jar:lib/b.jar",
            "-d",
            "out/libcore-groovy.jar.build_output",
            "src/a/Dsl.groovy",
        )

    def test_inputs_include_sources_and_closure(self) -> None:
        action = self._action()
        assert action.inputs == ("src/a/Dsl.groovy", "lib/a.jar", "lib/b.jar")
        assert action.outputs == ("out/libcore-groovy.jar",)

    def test_render_is_fail_fast(self) -> None:
        text = self._action().render()
        assert text.startswith("set -e\n")
        assert "jar cf out/libcore-groovy.jar -C out/libcore-groovy.jar.build_output ." in text
        assert text.rstrip().endswith("rm -rf out/libcore-groovy.jar.build_output")


class TestResourceAction:
    def test_copies_then_archives(self) -> None:
        action = resource_action(
            owner="core-res",
            archiver="jar",
            resources=[("src/main/resources/a/x.properties", "a/x.properties")],
            output="out/libcore-res.jar",
        )
        assert action.mnemonic == "JavaResourceJar"
        assert isinstance(action.steps[1], CopyStep)
        assert action.steps[1].dest == "out/libcore-res.jar.build_output/a/x.properties"
        assert isinstance(action.steps[2], ArchiveStep)


class TestWriteFileAction:
    def test_single_step(self) -> None:
        action = write_file_action(
            mnemonic="GroovyTestScript",
            owner="t",
            output="out/t.sh",
            content="java -cp x Main\n",
            executable=True,
        )
        assert action.inputs == ()
        assert len(action.steps) == 1
        assert "(executable)" in action.render()


class TestStepUnion:
    def test_discriminated_by_kind(self) -> None:
        adapter = TypeAdapter(Step)
        step = adapter.validate_python({"kind": StepKind.CLEANUP, "path": "x"})
        assert isinstance(step, CleanupStep)
        step = adapter.validate_python({"kind": StepKind.PREPARE_SCRATCH, "path": "x"})
        assert isinstance(step, PrepareScratchStep)

    def test_action_rebuilds_from_dump(self) -> None:
        action = BuildAction(
            mnemonic="Javac",
            owner="a",
            outputs=("o.jar",),
            steps=(CompileStep(argv=("javac", "A.java")),),
        )
        assert BuildAction.model_validate(action.model_dump()) == action
