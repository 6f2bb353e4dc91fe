"""Pluggy hook specifications for groovyrules build lifecycle events.

Hooks observe target declaration, each executed build action, and test
runs. They are dispatched synchronously from the service layer.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("groovyrules")


class GroovyRulesHookSpec:
    """Hook specifications for the groovyrules plugin system."""

    @hookspec
    def post_declare(self, unit_name: str, kind: str, artifacts: list[str]) -> None:
        """Called after a target (and everything it generated) is committed."""

    @hookspec
    def pre_action(self, mnemonic: str, owner: str, outputs: list[str]) -> None:
        """Called before a build action runs its first step."""

    @hookspec
    def post_action(
        self,
        mnemonic: str,
        owner: str,
        outputs: list[str],
        ok: bool,
        duration_ms: float,
    ) -> None:
        """Called after a build action finished, successfully or not."""

    @hookspec
    def post_test(self, name: str, exit_code: int) -> None:
        """Called after a generated test script ran."""
