"""Cell addresses — ``B3`` to ``(row, column)`` and back.

Columns are single letters ``A``–``Z`` (index 0–25). Rows are the
identifier's numeric suffix, zero-based, matching the grid row index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pipecalc.domain.errors import InvalidAddressError, OutOfBoundsError

if TYPE_CHECKING:
    from pipecalc.domain.cells import Cell, Grid

MAX_COLUMN = 25


@dataclass(frozen=True)
class Address:
    """A (column, row) grid position."""

    column: int
    row: int

    def __str__(self) -> str:
        return position_label(self.row, self.column)


def column_letter(index: int) -> str:
    """``0 -> "A"``, ``25 -> "Z"``."""
    if not 0 <= index <= MAX_COLUMN:
        raise OutOfBoundsError(f"Column index {index} has no letter", column=index)
    return chr(ord("A") + index)


def column_index(letter: str) -> int:
    """``"A" -> 0``, ``"Z" -> 25``."""
    if len(letter) != 1 or not "A" <= letter <= "Z":
        raise InvalidAddressError(f"Invalid column letter {letter!r}", identifier=letter)
    return ord(letter) - ord("A")


def parse_address(identifier: str) -> Address:
    """Parse ``<UppercaseLetter><NonNegativeInteger>`` into an Address.

    Raises:
        InvalidAddressError: Leading character is not ``A``–``Z`` or the
            suffix is not a plain decimal integer.
    """
    if not identifier or not "A" <= identifier[0] <= "Z":
        raise InvalidAddressError(
            f"Invalid cell identifier {identifier!r}: must start with A-Z",
            identifier=identifier,
        )
    digits = identifier[1:]
    if not digits.isascii() or not digits.isdigit():
        raise InvalidAddressError(
            f"Invalid cell identifier {identifier!r}: row must be a non-negative integer",
            identifier=identifier,
        )
    return Address(column=column_index(identifier[0]), row=int(digits))


def format_address(address: Address) -> str:
    """Inverse of :func:`parse_address`."""
    if address.row < 0:
        raise OutOfBoundsError(f"Row {address.row} is negative", row=address.row)
    return f"{column_letter(address.column)}{address.row}"


def position_label(row: int, column: int) -> str:
    """Human-readable label for a position, even one with no valid identifier."""
    if 0 <= column <= MAX_COLUMN and row >= 0:
        return f"{chr(ord('A') + column)}{row}"
    return f"R{row}C{column}"


def lookup(grid: Grid, address: Address) -> Cell:
    """Return the cell at *address*.

    Raises:
        OutOfBoundsError: The row or column lies outside the grid.
    """
    if not 0 <= address.row < len(grid) or not 0 <= address.column < len(grid[address.row]):
        raise OutOfBoundsError(
            f"Cell {position_label(address.row, address.column)} is outside the grid",
            column=address.column,
            row=address.row,
        )
    return grid[address.row][address.column]
