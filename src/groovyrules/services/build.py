"""BuildService — inspect, plan, build and test declared targets.

Building a target runs, in topological order, every action producing its
artifacts, its runtime closure and its runfiles. Actions run one at a
time; the first failure stops the build and nothing after it runs.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from groovyrules.domain.closure import DependencyClosure
from groovyrules.domain.errors import GroovyRulesError
from groovyrules.domain.types import UnitKind
from groovyrules.services._helpers import error_result
from groovyrules.services.base import BaseService
from groovyrules.services.result import ServiceError, ServiceResult
from groovyrules.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from groovyrules.domain.actions import BuildAction
    from groovyrules.infrastructure.executor import ActionExecutor

_OUTPUT_TAIL = 4000


class BuildService(BaseService):
    """Queries and executes the workspace build graph."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @traced
    def targets(self, *, kind: str | None = None) -> ServiceResult:
        """List declared targets, optionally filtered by unit kind."""
        units = [
            u
            for u in self._workspace.graph.units()
            if kind is None or u.kind.value == kind
        ]
        items = [u.to_dict() for u in sorted(units, key=lambda u: u.name)]
        return ServiceResult(ok=True, op="targets", data={"count": len(items), "items": items})

    @traced
    def closure(self, name: str) -> ServiceResult:
        """Show the runtime closure of *name* as a classpath."""
        try:
            unit = self._workspace.graph.get_unit(name)
        except GroovyRulesError as exc:
            return error_result("closure", exc)

        closure = DependencyClosure(artifacts=unit.runtime_closure or frozenset(unit.artifacts))
        separator = self._settings.toolchain.path_separator
        return ServiceResult(
            ok=True,
            op="closure",
            data={
                "target": name,
                "kind": unit.kind.value,
                "count": len(closure),
                "classpath": closure.classpath(separator=separator),
                "items": [
                    {"id": a.path, "short_path": a.short_path} for a in closure.ordered()
                ],
            },
        )

    @traced
    def plan(self, name: str) -> ServiceResult:
        """List the actions ``build`` would run for *name*, in order."""
        try:
            actions = self._actions_for(name)
        except GroovyRulesError as exc:
            return error_result("plan", exc)
        return ServiceResult(
            ok=True,
            op="plan",
            data={
                "target": name,
                "count": len(actions),
                "items": [
                    {**action.to_dict(), "id": action.outputs[0], "command": action.render()}
                    for action in actions
                ],
            },
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @traced
    def build(self, name: str) -> ServiceResult:
        """Run every action *name* needs."""
        warnings: list[str] = []
        try:
            actions = self._actions_for(name)
            self._execute(actions, self._workspace.executor(), warnings)
        except GroovyRulesError as exc:
            return error_result("build", exc, warnings=warnings)

        unit = self._workspace.graph.get_unit(name)
        return ServiceResult(
            ok=True,
            op="build",
            data={
                "target": name,
                "actions_run": len(actions),
                "outputs": [a.path for a in unit.artifacts],
            },
            warnings=warnings,
        )

    @traced
    def test(self, name: str) -> ServiceResult:
        """Build a test target, lay out its runfiles and run its script.

        The script's exit code is the test result.
        """
        warnings: list[str] = []
        settings = self._settings
        try:
            unit = self._workspace.graph.get_unit(name)
            if unit.kind != UnitKind.TEST:
                return ServiceResult(
                    ok=False,
                    op="test",
                    error=ServiceError(
                        code="NOT_A_TEST",
                        message=f"'{name}' is a {unit.kind.value}, not a test",
                        detail={"target": name},
                    ),
                )
            executor = self._workspace.executor()
            self._execute(self._actions_for(name), executor, warnings)

            script = unit.artifacts[0]
            bundle = sorted({(a.path, a.short_path) for a in (*unit.runfiles, script)})
            runfiles_dir = settings.output_root / f"{name}.runfiles"
            executor.materialize(bundle, runfiles_dir)
            proc = executor.run_script(settings.toolchain.shell, script.short_path, runfiles_dir)
        except GroovyRulesError as exc:
            return error_result("test", exc, warnings=warnings)

        self._dispatch_event("post_test", {"name": name, "exit_code": proc.returncode}, warnings)
        data: dict[str, Any] = {
            "target": name,
            "exit_code": proc.returncode,
            "classes": unit.attrs.get("classes", []),
            "runfiles": str(runfiles_dir),
            "output": (proc.stdout or "")[-_OUTPUT_TAIL:],
        }
        if proc.returncode != 0:
            return ServiceResult(
                ok=False,
                op="test",
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code="TEST_FAILED",
                    message=f"Test '{name}' exited with code {proc.returncode}",
                    detail={"exit_code": proc.returncode, "stderr": (proc.stderr or "")[-_OUTPUT_TAIL:]},
                ),
            )
        return ServiceResult(ok=True, op="test", data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _actions_for(self, name: str) -> list[BuildAction]:
        graph = self._workspace.graph
        return graph.actions_for(graph.required_paths(name))

    def _execute(
        self,
        actions: list[BuildAction],
        executor: ActionExecutor,
        warnings: list[str],
    ) -> None:
        for action in actions:
            outputs = list(action.outputs)
            hook_payload = {"mnemonic": action.mnemonic, "owner": action.owner, "outputs": outputs}
            self._dispatch_event("pre_action", hook_payload, warnings)
            started = time.perf_counter()
            ok = False
            with trace_span(f"{action.mnemonic} {action.owner}") as span:
                try:
                    executor.execute(action)
                    ok = True
                finally:
                    duration_ms = (time.perf_counter() - started) * 1000
                    if span is not None:
                        span.annotate("outputs", outputs)
                        span.annotate("ok", ok)
                    self._dispatch_event(
                        "post_action",
                        {**hook_payload, "ok": ok, "duration_ms": duration_ms},
                        warnings,
                    )
