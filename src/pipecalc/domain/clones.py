"""Clone resolution — copy a neighbour, shifting its cell references.

A clone cell is ``:`` followed by an arrow pointing at its source:
``^`` up, ``>`` right, ``v`` down, ``<`` left. When the source is an
expression, every reference in it moves one step along the clone's axis,
the way fill-down/fill-right adjusts relative references.

INVARIANT: Clones are resolved in a single row-major pass and the whole
grid is resolved before any expression is evaluated.
"""

from __future__ import annotations

import re
from dataclasses import replace
from enum import StrEnum

from pipecalc.domain.addresses import (
    MAX_COLUMN,
    Address,
    column_index,
    format_address,
    lookup,
    position_label,
)
from pipecalc.domain.cells import Cell, CellKind, Grid
from pipecalc.domain.errors import GridError, MalformedCloneError, OutOfBoundsError

# Reference token not embedded in a longer word or a numeric literal (``1E5``).
_REFERENCE_PATTERN = re.compile(r"(?<![\w.])([A-Z])(\d+)\b")


class Direction(StrEnum):
    """Where a clone's source sits relative to the clone."""

    UP = "^"
    RIGHT = ">"
    DOWN = "v"
    LEFT = "<"

    @property
    def offset(self) -> tuple[int, int]:
        """``(row, column)`` step from the clone to its source."""
        return _SOURCE_OFFSETS[self]

    @property
    def shift(self) -> tuple[int, int]:
        """``(row, column)`` step applied to references copied from the source."""
        return _REFERENCE_SHIFTS[self]


_SOURCE_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}

# The clone sits one step further from the origin than its source, in the
# opposite sense of the arrow.
_REFERENCE_SHIFTS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (1, 0),
    Direction.RIGHT: (0, -1),
    Direction.DOWN: (-1, 0),
    Direction.LEFT: (0, 1),
}


def parse_direction(content: str) -> Direction:
    """Read the direction of a clone cell's content (``":v"`` -> DOWN).

    Raises:
        MalformedCloneError: Content is not exactly ``:`` plus one arrow.
    """
    if len(content) != 2:
        raise MalformedCloneError(
            f"Clone {content!r} must be ':' followed by one of ^ > v <",
            content=content,
        )
    try:
        return Direction(content[1])
    except ValueError:
        raise MalformedCloneError(
            f"Unrecognized clone direction {content[1]!r}",
            content=content,
        ) from None


def source_position(row: int, col: int, direction: Direction) -> tuple[int, int]:
    """Position of the cell a clone at ``(row, col)`` copies from."""
    d_row, d_col = direction.offset
    return row + d_row, col + d_col


def shift_references(formula: str, direction: Direction) -> str:
    """Shift every cell reference in *formula* for a clone in *direction*.

    Each token is rewritten exactly once.

    Raises:
        OutOfBoundsError: A column moves past ``A``/``Z`` or a row below 0.
    """
    d_row, d_col = direction.shift

    def _shift(match: re.Match[str]) -> str:
        token = match.group(0)
        column = column_index(match.group(1)) + d_col
        row = int(match.group(2)) + d_row
        if not 0 <= column <= MAX_COLUMN:
            raise OutOfBoundsError(
                f"Shifting {token} {direction.name.lower()} moves its column past A-Z",
                reference=token,
            )
        if row < 0:
            raise OutOfBoundsError(
                f"Shifting {token} {direction.name.lower()} moves its row below 0",
                reference=token,
            )
        return format_address(Address(column=column, row=row))

    return _REFERENCE_PATTERN.sub(_shift, formula)


def resolve_clone(grid: Grid, row: int, col: int) -> Cell:
    """Return the cell that replaces the clone at ``(row, col)``.

    Does not mutate *grid*.
    """
    label = position_label(row, col)
    clone = grid[row][col]
    try:
        direction = parse_direction(clone.content)
    except GridError as exc:
        exc.at_cell(label)
        raise

    src_row, src_col = source_position(row, col, direction)
    try:
        source = lookup(grid, Address(column=src_col, row=src_row))
    except OutOfBoundsError:
        raise OutOfBoundsError(
            f"Clone at {label} points {direction.name.lower()}, outside the grid",
            cell=label,
            direction=direction.name.lower(),
        ) from None

    if source.kind is CellKind.CLONE:
        raise MalformedCloneError(
            f"Clone at {label} points at unresolved clone at {position_label(src_row, src_col)}",
            cell=label,
            source=position_label(src_row, src_col),
        )
    if source.kind is CellKind.EXPRESSION:
        try:
            shifted = shift_references(source.content, direction)
        except GridError as exc:
            exc.at_cell(label)
            raise
        return Cell(shifted, CellKind.EXPRESSION)
    return replace(source)


def resolve_clones(grid: Grid) -> int:
    """Replace every clone in *grid* in place, row-major. Returns the count."""
    resolved = 0
    for row_idx, row in enumerate(grid):
        for col_idx, cell in enumerate(row):
            if cell.kind is CellKind.CLONE:
                row[col_idx] = resolve_clone(grid, row_idx, col_idx)
                resolved += 1
    return resolved
