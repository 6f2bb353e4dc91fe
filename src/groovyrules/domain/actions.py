"""Build actions as explicit, ordered lists of typed steps.

An action never runs a concatenated shell string. It is a sequence of
steps (prepare scratch, compile, archive, cleanup, ...) that the executor
runs one at a time with fail-fast semantics. :meth:`BuildAction.render`
produces the equivalent shell text for ``plan`` output only.

The scratch directory of a compile action is private to it: its name is
derived from the unique output path.
"""

from __future__ import annotations

import shlex
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from groovyrules.domain.closure import DependencyClosure
from groovyrules.domain.types import StepKind

SCRATCH_SUFFIX = ".build_output"


class PrepareScratchStep(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[StepKind.PREPARE_SCRATCH] = StepKind.PREPARE_SCRATCH
    path: str

    def render(self) -> str:
        return f"rm -rf {shlex.quote(self.path)}; mkdir -p {shlex.quote(self.path)}"


class CompileStep(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[StepKind.COMPILE] = StepKind.COMPILE
    argv: tuple[str, ...]
    classpath: str = ""

    def render(self) -> str:
        return shlex.join(self.argv)


class CopyStep(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[StepKind.COPY] = StepKind.COPY
    src: str
    dest: str

    def render(self) -> str:
        return f"cp {shlex.quote(self.src)} {shlex.quote(self.dest)}"


class ArchiveStep(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[StepKind.ARCHIVE] = StepKind.ARCHIVE
    argv: tuple[str, ...]
    output: str

    def render(self) -> str:
        return shlex.join(self.argv)


class CleanupStep(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[StepKind.CLEANUP] = StepKind.CLEANUP
    path: str

    def render(self) -> str:
        return f"rm -rf {shlex.quote(self.path)}"


class WriteFileStep(BaseModel):
    model_config = {"frozen": True}

    kind: Literal[StepKind.WRITE_FILE] = StepKind.WRITE_FILE
    path: str
    content: str
    executable: bool = False

    def render(self) -> str:
        mode = " (executable)" if self.executable else ""
        return f"# write {self.path}{mode}: {self.content.strip()}"


Step = Annotated[
    PrepareScratchStep | CompileStep | CopyStep | ArchiveStep | CleanupStep | WriteFileStep,
    Field(discriminator="kind"),
]


class BuildAction(BaseModel):
    """One atomic unit of work: either every output is published or none is."""

    model_config = {"frozen": True}

    mnemonic: str
    owner: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...]
    steps: tuple[Step, ...]

    @property
    def scratch_dirs(self) -> list[str]:
        return [s.path for s in self.steps if isinstance(s, PrepareScratchStep)]

    @property
    def compile_step(self) -> CompileStep | None:
        for step in self.steps:
            if isinstance(step, CompileStep):
                return step
        return None

    def render(self) -> str:
        """Equivalent fail-fast shell script, for display."""
        return "set -e\n" + "\n".join(step.render() for step in self.steps)

    def to_dict(self) -> dict[str, object]:
        return {
            "mnemonic": self.mnemonic,
            "owner": self.owner,
            "outputs": list(self.outputs),
            "steps": [step.kind.value for step in self.steps],
        }


# ---------------------------------------------------------------------------
# Action builders
# ---------------------------------------------------------------------------


def compile_action(
    *,
    mnemonic: str,
    owner: str,
    compiler: str,
    archiver: str,
    srcs: tuple[str, ...] | list[str],
    closure: DependencyClosure,
    output: str,
    separator: str = ":",
) -> BuildAction:
    """Compile *srcs* against *closure* and jar the result into *output*.

    Steps: prepare scratch, compile, archive, cleanup.
    """
    scratch = output + SCRATCH_SUFFIX
    classpath = closure.classpath(separator=separator)
    return BuildAction(
        mnemonic=mnemonic,
        owner=owner,
        inputs=(*srcs, *(a.path for a in closure.ordered())),
        outputs=(output,),
        steps=(
            PrepareScratchStep(path=scratch),
            CompileStep(
                argv=(compiler, "-cp", classpath, "-d", scratch, *srcs),
                classpath=classpath,
            ),
            ArchiveStep(argv=(archiver, "cf", output, "-C", scratch, "."), output=output),
            CleanupStep(path=scratch),
        ),
    )


def resource_action(
    *,
    owner: str,
    archiver: str,
    resources: list[tuple[str, str]],
    output: str,
) -> BuildAction:
    """Jar *resources*, given as ``(source, path inside the jar)`` pairs."""
    scratch = output + SCRATCH_SUFFIX
    copies = [CopyStep(src=src, dest=f"{scratch}/{dest}") for src, dest in resources]
    return BuildAction(
        mnemonic="JavaResourceJar",
        owner=owner,
        inputs=tuple(src for src, _ in resources),
        outputs=(output,),
        steps=(
            PrepareScratchStep(path=scratch),
            *copies,
            ArchiveStep(argv=(archiver, "cf", output, "-C", scratch, "."), output=output),
            CleanupStep(path=scratch),
        ),
    )


def write_file_action(
    *,
    mnemonic: str,
    owner: str,
    output: str,
    content: str,
    executable: bool = False,
) -> BuildAction:
    return BuildAction(
        mnemonic=mnemonic,
        owner=owner,
        outputs=(output,),
        steps=(WriteFileStep(path=output, content=content, executable=executable),),
    )
