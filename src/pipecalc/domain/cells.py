"""Cell classification — raw field text to typed cells.

Pure functions, no infrastructure dependencies. Classification never
inspects other cells, so rows are classified independently.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

DEFAULT_NUMBER_FORMAT = "%.2f"
CELL_DELIMITER = "|"

_UPPERCASE = re.compile(r"[A-Z]")


class CellKind(StrEnum):
    """What a cell holds. Expression and Clone never survive the pipeline."""

    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"
    EXPRESSION = "expression"
    CLONE = "clone"


@dataclass(frozen=True)
class Cell:
    """One addressable unit of the grid."""

    content: str
    kind: CellKind = CellKind.EMPTY

    @property
    def is_terminal(self) -> bool:
        return self.kind not in (CellKind.EXPRESSION, CellKind.CLONE)


Grid = list[list[Cell]]


def format_number(value: float, number_format: str = DEFAULT_NUMBER_FORMAT) -> str:
    """Render *value* with a printf-style format such as ``%.2f``."""
    return number_format % value


def parse_number(text: str) -> float | None:
    """Parse *text* as a float, returning None when it is not numeric.

    Only plain ASCII decimal, exponent, and ``inf``/``nan`` forms count;
    digit-group underscores (``1_000``) and non-ASCII digits do not.
    """
    if not text.isascii() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def cell_value(cell: Cell) -> float:
    """Numeric value of a Number cell (its formatted content re-parsed)."""
    return float(cell.content)


def classify(text: str, number_format: str = DEFAULT_NUMBER_FORMAT) -> Cell:
    """Classify one trimmed field. First matching rule wins.

    Examples:
        >>> classify("=A1+B1").kind
        <CellKind.EXPRESSION: 'expression'>
        >>> classify("1e2")
        Cell(content='100.00', kind=<CellKind.NUMBER: 'number'>)
        >>> classify("total").kind
        <CellKind.EMPTY: 'empty'>
    """
    if text.startswith("="):
        return Cell(text, CellKind.EXPRESSION)
    if text.startswith(":"):
        # Direction is validated by the clone resolver.
        return Cell(text, CellKind.CLONE)
    value = parse_number(text)
    if value is not None:
        return Cell(format_number(value, number_format), CellKind.NUMBER)
    if _UPPERCASE.search(text):
        return Cell(text, CellKind.TEXT)
    return Cell(text, CellKind.EMPTY)


def classify_row(line: str, number_format: str = DEFAULT_NUMBER_FORMAT) -> list[Cell]:
    """Split a row on the delimiter, trim each field, and classify it."""
    return [classify(field.strip(), number_format) for field in line.split(CELL_DELIMITER)]


def parse_grid(text: str, number_format: str = DEFAULT_NUMBER_FORMAT) -> Grid:
    """Classify a whole input document into a grid.

    Rows are newline-separated. Rectangularity is assumed, not validated.
    """
    content = text.strip()
    if not content:
        return []
    return [classify_row(line, number_format) for line in content.split("\n")]


def grid_contents(grid: Grid) -> list[list[str]]:
    """Plain content matrix of *grid*, for rendering and payloads."""
    return [[cell.content for cell in row] for row in grid]
