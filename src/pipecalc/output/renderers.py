"""Grid renderers.

The resolved grid is rendered as plain text: it is the program's real
output and must re-ingest to the same grid, so no Rich markup touches it.
Diagnostics (debug dump, errors, stage timings) go through a Rich
Console and are meant for stderr.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pipecalc.domain.addresses import MAX_COLUMN, column_letter
from pipecalc.domain.cells import CELL_DELIMITER
from pipecalc.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from pipecalc.services.result import ServiceResult

PRETTY_DELIMITER = f" {CELL_DELIMITER} "


# ── Grid output ───────────────────────────────────────────────────────


def column_widths(rows: list[list[str]]) -> list[int]:
    """Widest content per column. Short rows simply contribute nothing."""
    widths: list[int] = []
    for row in rows:
        for idx, content in enumerate(row):
            if idx == len(widths):
                widths.append(0)
            widths[idx] = max(widths[idx], len(content))
    return widths


def render_grid(rows: list[list[str]], *, pretty: bool = False, pad: bool = False) -> str:
    """Render a content matrix back into pipe-delimited text.

    Args:
        rows: Cell contents, row by row.
        pretty: Put a space on each side of the delimiter.
        pad: Left-align every column but the last to its widest cell.

    Examples:
        >>> render_grid([["A", "B"], ["3.00", "7.00"]], pretty=True)
        'A | B\\n3.00 | 7.00'
        >>> render_grid([["A", "B"], ["3.00", "7.00"]], pad=True)
        'A   |B\\n3.00|7.00'
    """
    delimiter = PRETTY_DELIMITER if pretty else CELL_DELIMITER
    widths = column_widths(rows) if pad else []
    lines: list[str] = []
    for row in rows:
        last = len(row) - 1
        parts = [
            content.ljust(widths[idx]) if pad and idx < last else content
            for idx, content in enumerate(row)
        ]
        lines.append(delimiter.join(parts))
    return "\n".join(lines)


# ── Diagnostics ───────────────────────────────────────────────────────


def _column_header(idx: int) -> str:
    return column_letter(idx) if idx <= MAX_COLUMN else f"#{idx}"


def render_debug_grid(cells: list[list[dict[str, Any]]]) -> str:
    """Draw the intermediate grid as a table, each cell styled by its kind."""
    console = create_console()
    contents = [[str(cell["content"]) for cell in row] for row in cells]
    widths = column_widths(contents)

    console.print(Text(f"Rows: {len(cells)}", style="calc.key"))
    console.print(Text(f"Widths: {widths}", style="calc.key"))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", style="calc.key", justify="right")
    for idx in range(len(widths)):
        table.add_column(_column_header(idx), header_style="calc.header")

    for row_idx, row in enumerate(cells):
        rendered = [Text(str(row_idx), style="calc.key")]
        for cell in row:
            rendered.append(Text(str(cell["content"]), style=style_for_kind(str(cell["kind"]))))
        table.add_row(*rendered)

    console.print(table)
    return get_output(console).rstrip("\n")


def render_error(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a failed result as ``ERROR  op — message`` plus detail when verbose."""
    console = create_console()
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="calc.error")
    op = Text(f"  {result.op}", style="calc.op")
    code = Text(f" [{err.code}]", style="calc.key") if err else Text("")
    console.print(label, op, code, Text(" — "), Text(msg), sep="", soft_wrap=True)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"), soft_wrap=True)

    return get_output(console).rstrip("\n")


def render_timings(result: ServiceResult) -> str:
    """Render per-stage timings from ``result.meta`` (verbose only)."""
    timings: dict[str, float] = (result.meta or {}).get("timings_ms", {})
    if not timings:
        return ""
    console = create_console()
    console.print(Text("  timings:", style="dim"))
    for stage, duration in timings.items():
        console.print(f"    [dim]{duration:>8.3f}ms[/dim]  {stage}")
    return get_output(console).rstrip("\n")
