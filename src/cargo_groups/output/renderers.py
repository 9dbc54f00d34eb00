"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.text import Text

from cargo_groups.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from cargo_groups.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: package names only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "list_groups":
        return "\n".join(g["name"] for g in result.data.get("groups", []))
    if result.op == "show_group":
        return "\n".join(p["name"] for p in result.data.get("packages", []))
    if result.op == "plan":
        return str(result.data.get("command", ""))
    return ""


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="cg.ok")
    op = Text(f"  {result.op}", style="cg.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    line = Text(f"  {key}: ", style="cg.key")
    line.append(str(value), style="cg.command" if key == "command" else "")
    console.print(line)


def _group_block(console: Console, name: str, packages: list[dict[str, str]]) -> None:
    """``[group]`` header followed by one ``name path`` line per package."""
    console.print(Text(f"[{name}]", style="cg.group"))
    for pkg in packages:
        line = Text("  ")
        line.append(pkg["name"], style="cg.package")
        line.append(" ")
        line.append(pkg["path"] or ".", style="cg.path")
        console.print(line)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cg.error")
    op = Text(f"  {result.op}", style="cg.op")
    console.print(label, op, Text(" — "), Text(msg))

    if err and err.code == "GROUP_NOT_FOUND" and err.detail.get("available"):
        console.print(Text(f"  available groups: {', '.join(err.detail['available'])}"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Group renderers ───────────────────────────────────────────────────


def _render_list_groups(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    groups = result.data.get("groups", [])
    if not groups:
        console.print(Text("No groups found"))
        return
    for group in groups:
        _group_block(console, group["name"], group["packages"])
        if verbose:
            console.print(Text(f"  patterns: {', '.join(group['patterns'])}", style="dim"))


def _render_show_group(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _group_block(console, d["name"], d["packages"])
    if verbose:
        console.print(Text(f"  patterns: {', '.join(d['patterns'])}", style="dim"))


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a dry run: the command that would be executed."""
    _status_line(console, result)
    d = result.data
    _field(console, "group", d["group"])
    _field(console, "top_level", d["top_level"])
    _field(console, "packages", len(d["packages"]))
    _field(console, "command", d["command"])


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """cargo already printed its own output; only summarize in verbose mode."""
    if not verbose:
        return
    _render_plan(result, console, verbose=verbose)
    _field(console, "exit_code", result.data.get("exit_code"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "list_groups": _render_list_groups,
    "show_group": _render_show_group,
    "plan": _render_plan,
    "run": _render_run,
}
