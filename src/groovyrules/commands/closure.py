"""Command: show a target's runtime closure."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.commands._base import GroovyRulesCommand

if TYPE_CHECKING:
    from groovyrules.commands._context import AppContext


@click.command(
    cls=GroovyRulesCommand,
    examples="""\
  groovyrules closure app
  groovyrules -v closure app
  groovyrules -q closure app-groovy""",
)
@click.argument("target")
@click.pass_obj
def closure(app: AppContext, target: str) -> None:
    """Show every jar TARGET needs at runtime."""
    from groovyrules.services.build import BuildService

    app.emit(BuildService(app.workspace).closure(target))
