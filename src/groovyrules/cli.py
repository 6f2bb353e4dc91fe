"""Root CLI group for groovyrules with global flags and command registration."""

from __future__ import annotations

import click

from groovyrules import __version__
from groovyrules.commands import register_commands
from groovyrules.commands._base import GroovyRulesGroup
from groovyrules.commands._context import AppContext
from groovyrules.config.settings import GroovyRulesSettings


@click.group(
    cls=GroovyRulesGroup,
    invoke_without_command=True,
    examples="""\
  groovyrules targets
  groovyrules build app
  groovyrules -v test app-spec
  groovyrules -c ci/groovyrules.toml --json plan app""",
)
@click.version_option(version=__version__, prog_name="groovyrules")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """groovyrules — build rules for mixed Groovy/Java projects."""
    ctx.ensure_object(dict)
    settings = GroovyRulesSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
