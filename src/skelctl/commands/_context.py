"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Owns logging setup, the prompt device choice, and
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from skelctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from skelctl.config.settings import SkelSettings
    from skelctl.services.result import ServiceResult
    from skelctl.services.session import PromptIO


class AppContext:
    """Per-invocation state flowing through Click's command hierarchy."""

    def __init__(self, settings: SkelSettings) -> None:
        self.settings = settings

        from skelctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def prompter(self) -> PromptIO:
        """Terminal prompter, or a defaults-only one under ``--no-interact``."""
        from skelctl.infrastructure.terminal import ClickPrompter, DefaultsPrompter

        if self.settings.no_interact:
            return DefaultsPrompter()
        return ClickPrompter()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr outside JSON mode.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
