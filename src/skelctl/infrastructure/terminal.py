"""Terminal I/O for prompt sessions.

:class:`PromptStyle` is the prompt's look (prefix, delimiter, colors,
banner). It is built once from ``[prompt]`` config and handed to the
session; nothing here keeps module-level styling state.

Two prompters implement the session's ``PromptIO`` protocol:

* :class:`ClickPrompter` reads from the terminal via ``click.prompt``.
* :class:`DefaultsPrompter` answers every question with its default
  (``--no-interact``).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from skelctl.config.models import PromptConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptStyle:
    """How prompt labels, banners, and warnings are decorated."""

    prefix: str = "[?]"
    prefix_color: str | None = "green"
    delimiter: str = " "
    banner: str = "Please answer the following:"
    banner_color: str | None = None
    confirm_color: str | None = "green"
    warning_color: str | None = "red"
    color: bool = True

    @classmethod
    def from_config(cls, config: PromptConfig) -> PromptStyle:
        return cls(
            prefix=config.prefix,
            prefix_color=config.prefix_color,
            delimiter=config.delimiter,
            banner=config.banner,
            banner_color=config.banner_color,
            confirm_color=config.confirm_color,
            warning_color=config.warning_color,
            color=config.color,
        )

    def _paint(self, text: str, fg: str | None, *, bold: bool = False) -> str:
        if not self.color or (fg is None and not bold):
            return text
        return click.style(text, fg=fg, bold=bold)

    def label(self, message: str, *, confirm: bool = False) -> str:
        """Prompt label: ``<prefix><delimiter><message>``."""
        if confirm:
            message = self._paint(message, self.confirm_color)
        prefix = self._paint(self.prefix, self.prefix_color)
        return f"{prefix}{self.delimiter}{message}" if self.prefix else message

    def banner_text(self) -> str:
        return self._paint(self.banner, self.banner_color, bold=True)

    def warning_text(self, warning: str) -> str:
        return self._paint(warning, self.warning_color)


class NonInteractiveError(Exception):
    """A default was rejected while running without a terminal."""


class ClickPrompter:
    """Interactive prompter backed by ``click.prompt``.

    Reads run in a worker thread so the event loop stays free while the
    user types.
    """

    def banner(self, text: str) -> None:
        click.echo()
        click.echo(text)

    def warn(self, text: str) -> None:
        click.echo(text)

    async def ask(self, label: str, default: str) -> str:
        return await asyncio.to_thread(self._prompt, label, default)

    @staticmethod
    def _prompt(label: str, default: str) -> str:
        value = click.prompt(label, default=default, show_default=bool(default), type=str)
        return str(value)


class DefaultsPrompter:
    """Accepts every suggested default without reading input."""

    def banner(self, text: str) -> None:
        logger.debug("non-interactive session: %s", click.unstyle(text))

    def warn(self, text: str) -> None:
        msg = f"{click.unstyle(text)} (rejected default in non-interactive mode)"
        raise NonInteractiveError(msg)

    async def ask(self, label: str, default: str) -> str:
        logger.debug("%s -> %s", click.unstyle(label), default)
        return default
