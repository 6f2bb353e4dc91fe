"""Command: infer test class names from source paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.commands._base import GroovyRulesCommand

if TYPE_CHECKING:
    from groovyrules.commands._context import AppContext


@click.command(
    cls=GroovyRulesCommand,
    examples="""\
  groovyrules classname src/test/java/com/example/FooSpec.groovy
  groovyrules classname --prefix test/ test/a/BarTest.groovy""",
)
@click.argument("paths", nargs=-1, required=True)
@click.option("--prefix", default=None, help="Test root (default: [layout] test_root).")
@click.pass_obj
def classname(app: AppContext, paths: tuple[str, ...], prefix: str | None) -> None:
    """Print the class name each test source path declares."""
    from groovyrules.infrastructure.workspace import Workspace
    from groovyrules.services.testing import TestService

    app.emit(TestService(Workspace(app.settings)).classnames(paths, prefix=prefix))
