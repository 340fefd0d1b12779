"""Subcommand modules for skelctl.

register_commands() defers imports so ``skelctl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from skelctl.commands.init_cmd import init_cmd
    from skelctl.commands.templates import templates

    cli.add_command(init_cmd)
    cli.add_command(templates)
