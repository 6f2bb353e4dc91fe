"""Built-in plugin that logs every executed build action.

Registered through the ``groovyrules.plugins`` entry point. Each action
becomes one structured log record, so ``-v --log-json`` yields a
machine-readable execution trace.
"""

from __future__ import annotations

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("groovyrules")


class ActionLogPlugin:
    """Emit a structlog event per action and per test run."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("groovyrules.actions")

    @hookimpl
    def post_declare(self, unit_name: str, kind: str, artifacts: list[str]) -> None:
        self._log.debug("target.declared", target=unit_name, kind=kind, artifacts=artifacts)

    @hookimpl
    def pre_action(self, mnemonic: str, owner: str, outputs: list[str]) -> None:
        self._log.debug("action.start", mnemonic=mnemonic, owner=owner, outputs=outputs)

    @hookimpl
    def post_action(
        self,
        mnemonic: str,
        owner: str,
        outputs: list[str],
        ok: bool,
        duration_ms: float,
    ) -> None:
        log = self._log.debug if ok else self._log.warning
        log(
            "action.complete",
            mnemonic=mnemonic,
            owner=owner,
            outputs=outputs,
            ok=ok,
            duration_ms=round(duration_ms, 2),
        )

    @hookimpl
    def post_test(self, name: str, exit_code: int) -> None:
        self._log.info("test.complete", target=name, exit_code=exit_code)
