"""Rich Console factory and theme for pipecalc diagnostics.

Consoles render to a StringIO buffer so every renderer keeps a
``-> str`` contract. In non-TTY environments (tests, pipes) Rich
automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PIPECALC_THEME = Theme(
    {
        "calc.ok": "bold green",
        "calc.error": "bold red",
        "calc.warning": "bold yellow",
        "calc.op": "bold cyan",
        "calc.key": "dim",
        "calc.header": "bold",
        "calc.kind.empty": "dim",
        "calc.kind.text": "green",
        "calc.kind.number": "magenta",
        "calc.kind.expression": "yellow",
        "calc.kind.clone": "bold red",
    }
)

_KIND_STYLES: dict[str, str] = {
    "empty": "calc.kind.empty",
    "text": "calc.kind.text",
    "number": "calc.kind.number",
    "expression": "calc.kind.expression",
    "clone": "calc.kind.clone",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PIPECALC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a cell kind."""
    return _KIND_STYLES.get(kind, "")
