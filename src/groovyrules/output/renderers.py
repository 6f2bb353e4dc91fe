"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from groovyrules.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from groovyrules.services.result import ServiceResult


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

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract an ID from a dict item (targets, actions, classes)."""
    if isinstance(item, dict):
        for key in ("id", "name"):
            val = item.get(key)
            if val is not None:
                return str(val)
        return ""
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="gr.ok")
    op = Text(f"  {result.op}", style="gr.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gr.key")
    if key in ("target", "name"):
        v = Text(str(value), style="gr.target")
    elif key in ("path", "build_file", "runfiles", "script"):
        v = Text(str(value), style="gr.path")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


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
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_warnings_count(console: Console, result: ServiceResult) -> None:
    if result.warnings:
        console.print(f"  [gr.warning]{len(result.warnings)} warning(s)[/gr.warning]")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="gr.error")
    op = Text(f"  {result.op}", style="gr.op")
    code = Text(f" [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(" - "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Declaration renderers ─────────────────────────────────────────────


def _render_declaration(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a rule or macro declaration."""
    _status_line(console, result)
    target = result.data.get("target", {})
    _field(console, "target", target.get("name", "?"))
    kind = str(target.get("kind", ""))
    console.print(
        Text("  kind: ", style="gr.key"), Text(kind, style=style_for_kind(kind) or "")
    )
    for artifact in target.get("artifacts", []):
        _field(console, "path", artifact)
    if result.data.get("generated"):
        _field(console, "generated", ", ".join(result.data["generated"]))
    _field(console, "actions", result.data.get("actions", 0))
    _render_warnings_count(console, result)
    if verbose:
        _render_meta(console, result)


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "build_file", result.data.get("build_file", ""))
    _field(console, "count", result.data.get("count", 0))
    _render_warnings_count(console, result)
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_targets(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render declared targets as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Target", style="gr.target", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Artifacts", style="gr.path")
    if verbose:
        table.add_column("Deps", style="dim")
    for item in items:
        kind = str(item.get("kind", ""))
        row = [
            str(item.get("name", "")),
            Text(kind, style=style_for_kind(kind)),
            "\n".join(item.get("artifacts", [])),
        ]
        if verbose:
            row.append(", ".join(item.get("deps", [])))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} targets")


def _render_closure(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "target", result.data.get("target", ""))
    _field(console, "count", result.data.get("count", 0))
    for item in result.data.get("items", []):
        console.print(f"    [gr.path]{item['id']}[/gr.path]")
    if verbose:
        _field(console, "classpath", result.data.get("classpath", ""))
        _render_meta(console, result)


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the ordered action list, with rendered commands when verbose."""
    _status_line(console, result)
    _field(console, "target", result.data.get("target", ""))
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=verbose, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Mnemonic", style="gr.mnemonic")
    table.add_column("Owner", style="gr.target")
    table.add_column("Output", style="gr.path")
    if verbose:
        table.add_column("Command")
    for index, item in enumerate(items, start=1):
        row = [str(index), item.get("mnemonic", ""), item.get("owner", ""), item.get("id", "")]
        if verbose:
            row.append(item.get("command", ""))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{len(items)} actions")


# ── Execution renderers ───────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "target", result.data.get("target", ""))
    _field(console, "actions_run", result.data.get("actions_run", 0))
    for output in result.data.get("outputs", []):
        _field(console, "path", output)
    _render_warnings_count(console, result)
    if verbose:
        _render_meta(console, result)


def _render_test(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "target", result.data.get("target", ""))
    _field(console, "exit_code", result.data.get("exit_code", 0))
    _field(console, "classes", ", ".join(result.data.get("classes", [])))
    if verbose:
        _field(console, "runfiles", result.data.get("runfiles", ""))
        output = result.data.get("output", "")
        if output:
            console.print()
            console.print(output.rstrip("\n"), markup=False)
        _render_meta(console, result)


def _render_classname(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for item in result.data.get("items", []):
        console.print(item["id"], markup=False)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Rules
    "java_import": _render_declaration,
    "java_library": _render_declaration,
    "groovy_jar": _render_declaration,
    "groovy_library": _render_declaration,
    "groovy_test": _render_declaration,
    "spock_test": _render_declaration,
    "groovy_junit_test": _render_declaration,
    "load": _render_load,
    # Queries
    "targets": _render_targets,
    "closure": _render_closure,
    "plan": _render_plan,
    "classname": _render_classname,
    # Execution
    "build": _render_build,
    "test": _render_test,
}
