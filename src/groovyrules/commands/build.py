"""Command: build a target."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.commands._base import GroovyRulesCommand

if TYPE_CHECKING:
    from groovyrules.commands._context import AppContext


@click.command(
    cls=GroovyRulesCommand,
    examples="""\
  groovyrules build app
  groovyrules -v build app""",
)
@click.argument("target")
@click.pass_obj
def build(app: AppContext, target: str) -> None:
    """Compile TARGET and everything it depends on."""
    from groovyrules.services.build import BuildService

    app.emit(BuildService(app.workspace).build(target))
