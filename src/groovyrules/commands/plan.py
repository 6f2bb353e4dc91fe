"""Command: show the actions a build would run."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.commands._base import GroovyRulesCommand

if TYPE_CHECKING:
    from groovyrules.commands._context import AppContext


@click.command(
    cls=GroovyRulesCommand,
    examples="""\
  groovyrules plan app
  groovyrules -v plan app-spec
  groovyrules --json plan app""",
)
@click.argument("target")
@click.pass_obj
def plan(app: AppContext, target: str) -> None:
    """List the actions needed to build TARGET, in execution order."""
    from groovyrules.services.build import BuildService

    app.emit(BuildService(app.workspace).plan(target))
