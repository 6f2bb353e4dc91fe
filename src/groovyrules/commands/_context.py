"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Workspace initialization (which loads
``BUILD.toml``) and centralized result emission (stdout/stderr routing
and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from groovyrules.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from groovyrules.config.settings import GroovyRulesSettings
    from groovyrules.infrastructure.executor import CommandRunner
    from groovyrules.infrastructure.workspace import Workspace
    from groovyrules.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help``, ``--version``
    and ``classname`` never read the build file.
    """

    def __init__(self, settings: GroovyRulesSettings, *, runner: CommandRunner | None = None) -> None:
        self.settings = settings
        self._runner = runner
        self._workspace: Workspace | None = None

        from groovyrules.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from groovyrules.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        """The workspace with every ``BUILD.toml`` target declared.

        A build file that fails to load is emitted as an error and the
        command exits with code 1.
        """
        if self._workspace is None:
            from groovyrules.infrastructure.workspace import Workspace
            from groovyrules.services.declarations import DeclarationService

            workspace = Workspace(self.settings, runner=self._runner)
            result = DeclarationService(workspace).load()
            if not result.ok:
                self.emit(result)
            self._echo_warnings(result)
            self._workspace = workspace
        return self._workspace

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self._output_settings()
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            self._echo_warnings(result)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def _output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def _echo_warnings(self, result: ServiceResult) -> None:
        # In JSON mode, warnings are already in the serialized payload.
        if self.settings.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
