"""ActionExecutor — runs build actions step by step, all-or-nothing.

Steps run in order with fail-fast semantics. Whatever happens, every
scratch directory the action prepared is removed afterwards; on failure
any output written so far is deleted, so a failed action never publishes
an artifact.

External tools are invoked through a :data:`CommandRunner`, which defaults
to :func:`subprocess.run` and can be swapped for tests.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from groovyrules.domain.actions import (
    ArchiveStep,
    BuildAction,
    CleanupStep,
    CompileStep,
    CopyStep,
    PrepareScratchStep,
    WriteFileStep,
)
from groovyrules.domain.errors import MissingInputError, ToolchainError

logger = logging.getLogger(__name__)

type CommandRunner = Callable[[Sequence[str], Path], subprocess.CompletedProcess[str]]

_STDERR_TAIL = 2000


def subprocess_runner(argv: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run *argv* in *cwd*, capturing output. Never raises on non-zero exit."""
    return subprocess.run(  # noqa: S603
        list(argv),
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )


class ActionExecutor:
    """Executes :class:`BuildAction` steps relative to a workspace root."""

    def __init__(self, root: Path, *, runner: CommandRunner | None = None) -> None:
        self._root = root
        self._run = runner or subprocess_runner

    def execute(self, action: BuildAction) -> None:
        """Run every step of *action*.

        Raises:
            MissingInputError: An input file does not exist.
            ToolchainError: A tool exited non-zero or an output is missing.
        """
        self._check_inputs(action)
        for output in action.outputs:
            (self._root / output).parent.mkdir(parents=True, exist_ok=True)
        try:
            for step in action.steps:
                self._run_step(action, step)
            self._check_outputs(action)
        except Exception:
            for output in action.outputs:
                (self._root / output).unlink(missing_ok=True)
            raise
        finally:
            for scratch in action.scratch_dirs:
                shutil.rmtree(self._root / scratch, ignore_errors=True)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _run_step(self, action: BuildAction, step: object) -> None:
        if isinstance(step, PrepareScratchStep):
            scratch = self._root / step.path
            shutil.rmtree(scratch, ignore_errors=True)
            scratch.mkdir(parents=True)
        elif isinstance(step, (CompileStep, ArchiveStep)):
            self._invoke(action, step.argv)
        elif isinstance(step, CopyStep):
            dest = self._root / step.dest
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self._root / step.src, dest)
        elif isinstance(step, CleanupStep):
            shutil.rmtree(self._root / step.path, ignore_errors=True)
        elif isinstance(step, WriteFileStep):
            path = self._root / step.path
            path.write_text(step.content, encoding="utf-8")
            if step.executable:
                path.chmod(0o755)
        else:
            msg = f"Unsupported step type: {type(step).__name__}"
            raise TypeError(msg)

    def _invoke(self, action: BuildAction, argv: Sequence[str]) -> None:
        logger.debug("%s: %s", action.mnemonic, " ".join(argv))
        try:
            proc = self._run(argv, self._root)
        except FileNotFoundError as exc:
            msg = f"{action.mnemonic} for '{action.owner}' could not start {argv[0]!r}"
            raise ToolchainError(msg, tool=argv[0], owner=action.owner) from exc
        if proc.returncode != 0:
            msg = f"{action.mnemonic} for '{action.owner}' failed with exit code {proc.returncode}"
            raise ToolchainError(
                msg,
                tool=argv[0],
                owner=action.owner,
                exit_code=proc.returncode,
                stderr=(proc.stderr or "")[-_STDERR_TAIL:],
            )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _check_inputs(self, action: BuildAction) -> None:
        missing = [p for p in action.inputs if not (self._root / p).exists()]
        if missing:
            msg = f"Missing input(s) for '{action.owner}': {', '.join(missing)}"
            raise MissingInputError(msg, owner=action.owner, missing=missing)

    def _check_outputs(self, action: BuildAction) -> None:
        missing = [p for p in action.outputs if not (self._root / p).is_file()]
        if missing:
            msg = f"{action.mnemonic} for '{action.owner}' did not produce {', '.join(missing)}"
            raise ToolchainError(msg, owner=action.owner, missing=missing)

    # ------------------------------------------------------------------
    # Runfiles and test execution
    # ------------------------------------------------------------------

    def materialize(self, artifacts: Sequence[tuple[str, str]], dest: Path) -> Path:
        """Copy ``(path, short_path)`` pairs into a fresh runfiles tree at *dest*.

        Raises:
            MissingInputError: An artifact does not exist on disk.
        """
        missing = [path for path, _ in artifacts if not (self._root / path).exists()]
        if missing:
            msg = f"Missing runfiles: {', '.join(missing)}"
            raise MissingInputError(msg, missing=missing)
        shutil.rmtree(dest, ignore_errors=True)
        dest.mkdir(parents=True)
        for path, short_path in artifacts:
            target = dest / short_path
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self._root / path, target)
        return dest

    def run_script(
        self,
        shell: str,
        script: str,
        cwd: Path,
    ) -> subprocess.CompletedProcess[str]:
        """Run a generated script from inside its runfiles tree."""
        logger.debug("Running %s in %s", script, cwd)
        try:
            return self._run([shell, script], cwd)
        except FileNotFoundError as exc:
            msg = f"Could not start {shell!r} to run {script}"
            raise ToolchainError(msg, tool=shell) from exc
