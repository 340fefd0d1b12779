"""Rich Console factory and theme for skelctl output.

Consoles render into a StringIO buffer so formatters can return plain
strings. Outside a terminal (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SKEL_THEME = Theme(
    {
        "skel.ok": "bold green",
        "skel.error": "bold red",
        "skel.warning": "bold yellow",
        "skel.op": "bold cyan",
        "skel.key": "dim",
        "skel.value": "",
        "skel.path": "dim",
        "skel.template": "bold blue",
        "skel.blank": "dim italic",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SKEL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
