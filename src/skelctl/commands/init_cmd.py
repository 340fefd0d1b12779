"""Command: project initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from skelctl.commands._base import SkelCommand

if TYPE_CHECKING:
    from skelctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  skelctl init python
  skelctl init node ./my-module
  skelctl --no-interact --json init python /tmp/demo
  skelctl init python . --force --defaults ~/team-defaults.toml"""


@click.command("init", cls=SkelCommand, examples=_INIT_EXAMPLES)
@click.argument("template")
@click.argument("path", required=False, default=".")
@click.option("--force", is_flag=True, help="Overwrite existing files.")
@click.option(
    "--defaults",
    "defaults_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Operator defaults file (TOML) instead of the user-level one.",
)
@click.pass_obj
def init_cmd(
    app: AppContext,
    template: str,
    path: str,
    force: bool,
    defaults_path: Path | None,
) -> None:
    """Initialize a project from TEMPLATE in PATH (default: current directory)."""
    from skelctl.services.init import InitService

    service = InitService(app.settings, io=app.prompter(), defaults_path=defaults_path)
    app.emit(service.init_project(template, Path(path), force=force))
