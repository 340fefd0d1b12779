"""Command: list available project templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from skelctl.commands._base import SkelCommand

if TYPE_CHECKING:
    from skelctl.commands._context import AppContext


@click.command("templates", cls=SkelCommand, examples="  skelctl templates\n  skelctl -q templates")
@click.pass_obj
def templates(app: AppContext) -> None:
    """List templates from configured paths and the built-in set."""
    from skelctl.services.init import InitService

    app.emit(InitService.list_templates(app.settings))
