"""Subcommand modules for groovyrules.

Provides register_commands() which uses deferred imports to keep
``groovyrules --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    # --- Queries ---
    from groovyrules.commands.classname import classname
    from groovyrules.commands.closure import closure
    from groovyrules.commands.plan import plan
    from groovyrules.commands.targets import targets

    cli.add_command(targets)
    cli.add_command(closure)
    cli.add_command(plan)
    cli.add_command(classname)

    # --- Execution ---
    from groovyrules.commands.build import build
    from groovyrules.commands.test_cmd import test_cmd

    cli.add_command(build)
    cli.add_command(test_cmd)
