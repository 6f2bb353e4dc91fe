"""Command: build and run a test target."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.commands._base import GroovyRulesCommand

if TYPE_CHECKING:
    from groovyrules.commands._context import AppContext


@click.command(
    "test",
    cls=GroovyRulesCommand,
    examples="""\
  groovyrules test app-spec
  groovyrules -v test app-spec""",
)
@click.argument("target")
@click.pass_obj
def test_cmd(app: AppContext, target: str) -> None:
    """Build TARGET, lay out its runfiles and run its test script."""
    from groovyrules.services.build import BuildService

    app.emit(BuildService(app.workspace).test(target))
