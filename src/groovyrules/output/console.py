"""Rich Console factory and theme for groovyrules output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GROOVYRULES_THEME = Theme(
    {
        "gr.ok": "bold green",
        "gr.error": "bold red",
        "gr.warning": "bold yellow",
        "gr.op": "bold cyan",
        "gr.key": "dim",
        "gr.target": "bold blue",
        "gr.path": "dim",
        "gr.mnemonic": "bold",
        "gr.kind.raw_files": "white",
        "gr.kind.compiled_library": "green",
        "gr.kind.composite_library": "blue",
        "gr.kind.test": "yellow",
    }
)

_KIND_STYLES: dict[str, str] = {
    "raw_files": "gr.kind.raw_files",
    "compiled_library": "gr.kind.compiled_library",
    "composite_library": "gr.kind.composite_library",
    "test": "gr.kind.test",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=GROOVYRULES_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a unit kind."""
    return _KIND_STYLES.get(kind, "")
