"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. Issue lines
are never rendered here; the command context writes them to stderr.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from corpusctl.output.console import (
    create_console,
    get_output,
    style_for_depth,
    style_for_state,
)

if TYPE_CHECKING:
    from rich.console import Console

    from corpusctl.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    # Node listings collapse to ids, one per line
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    if "state" in result.data:
        return str(result.data["state"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract a node id from an item dict (nodes carry ``id``, edges ``target``)."""
    if isinstance(item, dict):
        for key in ("id", "target"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "corpus.ok"), (f"  {result.op}", "corpus.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="corpus.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="corpus.id")
    elif key in ("content_root", "path", "source"):
        v = Text(str(value), style="corpus.path")
    elif key == "state":
        v = Text(str(value), style=style_for_state(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _node_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of graph nodes."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="corpus.id", no_wrap=True)
    table.add_column("Title", style="corpus.title")
    table.add_column("Phase")
    table.add_column("Depth")
    if verbose:
        table.add_column("Source", style="corpus.path")

    for item in items:
        depth = item.get("depth")
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("title", "")),
            str(item.get("phase", "")),
            Text(str(depth or "-"), style=style_for_depth(depth)),
        ]
        if verbose:
            row.append(str(item.get("source", "")))
        table.add_row(*row)

    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "corpus.error"), (f"  {result.op}", "corpus.op"), f" - {msg}")
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))
    if verbose:
        _render_meta(console, result)


# ── Build renderers ───────────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a validated build: state and corpus counts."""
    _status_line(console, result)
    d = result.data
    for key in ("state", "content_root", "files", "nodes", "edges"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "warnings", d.get("warning_count", len(result.warnings)))
    if verbose:
        _render_meta(console, result)


def _render_paths(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the learning-path audit totals."""
    _status_line(console, result)
    d = result.data
    for key in (
        "paths",
        "steps",
        "valid",
        "invalid",
        "missing_metadata",
        "unreferenced_documents",
    ):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        _render_meta(console, result)


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render export counts; the manifest itself is only emitted with --json."""
    _status_line(console, result)
    d = result.data
    _field(console, "documents", d.get("count", 0))
    _field(console, "nodes", len(d.get("nodes", [])))
    _field(console, "edges", len(d.get("edges", [])))
    console.print(Text("  use --json for the full manifest", style="dim"))
    if verbose:
        _render_meta(console, result)


# ── Graph renderers ───────────────────────────────────────────────────


def _render_node_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render graph_nodes / graph_neighbors as a table."""
    items = result.data.get("items", [])
    if "source_id" in result.data:
        console.print(
            Text.assemble(
                (f"{result.data.get('kind', '')} neighbours of ", "dim"),
                (str(result.data["source_id"]), "corpus.id"),
            )
        )
    console.print(_node_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} nodes")
    if verbose:
        _render_meta(console, result)


def _render_edges(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render outgoing edges of one node, marking unresolved targets."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Kind")
    table.add_column("Target", no_wrap=True)
    table.add_column("Reference")
    if verbose:
        table.add_column("Origin", style="corpus.path")

    for item in items:
        resolved = item.get("resolved", True)
        target = Text(str(item.get("target", "")), style="corpus.id" if resolved else "")
        if not resolved:
            target.append("  (missing)", style="corpus.missing")
        row: list[Any] = [str(item.get("kind", "")), target, str(item.get("reference", ""))]
        if verbose:
            row.append(str(item.get("origin", "")))
        table.add_row(*row)

    console.print(
        Text.assemble(
            ("edges from ", "dim"),
            (str(result.data.get("source_id", "")), "corpus.id"),
        )
    )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} edges")
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build": _render_build,
    "paths": _render_paths,
    "export": _render_export,
    "graph_nodes": _render_node_table,
    "graph_neighbors": _render_node_table,
    "graph_edges": _render_edges,
}
