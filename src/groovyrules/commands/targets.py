"""Command: list declared targets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.commands._base import GroovyRulesCommand
from groovyrules.domain.types import UnitKind

if TYPE_CHECKING:
    from groovyrules.commands._context import AppContext


@click.command(
    cls=GroovyRulesCommand,
    examples="""\
  groovyrules targets
  groovyrules targets --kind test
  groovyrules --json targets""",
)
@click.option(
    "--kind",
    type=click.Choice([k.value for k in UnitKind]),
    default=None,
    help="Only list targets of this kind.",
)
@click.pass_obj
def targets(app: AppContext, kind: str | None) -> None:
    """List every target declared in BUILD.toml."""
    from groovyrules.services.build import BuildService

    app.emit(BuildService(app.workspace).targets(kind=kind))
