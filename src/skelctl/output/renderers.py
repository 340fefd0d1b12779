"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from skelctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from skelctl.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose and result.meta:
            _render_meta(console, result.meta)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line: ``OK: <op>``, template names for listings, or the error."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("name", "")) for item in items if isinstance(item, dict))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="skel.ok"), Text(f"  {result.op}", style="skel.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    console.print(Text.assemble((f"  {key}: ", "skel.key"), (str(value), "skel.value")))


def _render_meta(console: Console, meta: dict[str, Any]) -> None:
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        console.print(Text(f"    {key}: {value}"))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="skel.error"),
        Text(f"  {result.op}", style="skel.op"),
        Text(" — "),
        Text(msg),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console) -> None:
    """Answers table followed by the list of written files."""
    data = result.data
    _status_line(console, result)
    _field(console, "template", data.get("template", ""))
    _field(console, "destination", data.get("destination", ""))

    answers: dict[str, Any] = data.get("answers", {})
    if answers:
        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("field", style="skel.key")
        table.add_column("answer")
        for key, value in answers.items():
            if isinstance(value, list):
                value = " ".join(str(v) for v in value)
            cell = Text(str(value)) if value != "" else Text("(blank)", style="skel.blank")
            table.add_row(key, cell)
        console.print(table)

    files: list[str] = data.get("files_created", [])
    console.print(Text(f"  {len(files)} file(s) written", style="skel.key"))
    for path in files:
        console.print(Text(f"    {path}", style="skel.path"))


def _render_templates(result: ServiceResult, console: Console) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print(Text("No templates found.", style="skel.warning"))
        return
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("template", style="skel.template")
    table.add_column("description")
    for item in items:
        table.add_row(item.get("name", ""), item.get("description", ""))
    console.print(table)


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    "init_project": _render_init,
    "list_templates": _render_templates,
}
