"""Tests for cell address parsing, formatting, and grid lookup."""

import pytest

from pipecalc.domain.addresses import (
    Address,
    column_index,
    column_letter,
    format_address,
    lookup,
    parse_address,
    position_label,
)
from pipecalc.domain.cells import CellKind, parse_grid
from pipecalc.domain.errors import InvalidAddressError, OutOfBoundsError


class TestParseAddress:
    @pytest.mark.parametrize(
        "identifier,column,row",
        [
            ("A0", 0, 0),
            ("B3", 1, 3),
            ("Z25", 25, 25),
            ("C120", 2, 120),
            ("D007", 3, 7),
        ],
    )
    def test_valid(self, identifier: str, column: int, row: int) -> None:
        assert parse_address(identifier) == Address(column=column, row=row)

    @pytest.mark.parametrize(
        "identifier",
        ["", "b3", "3B", "B", "B-1", "AA1", "B3.5", "B 3", "B+3", "É3", "B٣"],
    )
    def test_invalid(self, identifier: str) -> None:
        with pytest.raises(InvalidAddressError) as exc_info:
            parse_address(identifier)
        assert exc_info.value.code == "INVALID_ADDRESS"
        assert exc_info.value.detail["identifier"] == identifier


class TestFormatAddress:
    def test_inverse_of_parse(self) -> None:
        for identifier in ("A0", "B3", "Z25", "K1000"):
            assert format_address(parse_address(identifier)) == identifier

    def test_leading_zeros_normalized(self) -> None:
        assert format_address(parse_address("B03")) == "B3"

    def test_column_out_of_range(self) -> None:
        with pytest.raises(OutOfBoundsError):
            format_address(Address(column=26, row=0))

    def test_negative_row(self) -> None:
        with pytest.raises(OutOfBoundsError):
            format_address(Address(column=0, row=-1))


class TestColumns:
    def test_letter_and_index(self) -> None:
        assert column_letter(0) == "A"
        assert column_letter(25) == "Z"
        assert column_index("A") == 0
        assert column_index("Z") == 25

    def test_letter_out_of_range(self) -> None:
        with pytest.raises(OutOfBoundsError):
            column_letter(-1)
        with pytest.raises(OutOfBoundsError):
            column_letter(26)

    def test_index_rejects_lowercase(self) -> None:
        with pytest.raises(InvalidAddressError):
            column_index("a")


class TestPositionLabel:
    def test_valid_position(self) -> None:
        assert position_label(3, 1) == "B3"

    def test_position_without_identifier(self) -> None:
        assert position_label(-1, 0) == "R-1C0"
        assert position_label(0, 30) == "R0C30"

    def test_address_str(self) -> None:
        assert str(Address(column=2, row=9)) == "C9"


class TestLookup:
    def test_returns_cell(self) -> None:
        grid = parse_grid("A | B\n1 | 2")
        cell = lookup(grid, parse_address("B1"))
        assert cell.kind is CellKind.NUMBER
        assert cell.content == "2.00"

    @pytest.mark.parametrize("identifier", ["A2", "C0", "Z9"])
    def test_out_of_bounds(self, identifier: str) -> None:
        grid = parse_grid("A | B\n1 | 2")
        with pytest.raises(OutOfBoundsError) as exc_info:
            lookup(grid, parse_address(identifier))
        assert identifier in exc_info.value.message

    def test_negative_row_is_out_of_bounds(self) -> None:
        grid = parse_grid("A | B")
        with pytest.raises(OutOfBoundsError):
            lookup(grid, Address(column=0, row=-1))

    def test_empty_grid(self) -> None:
        with pytest.raises(OutOfBoundsError):
            lookup([], Address(column=0, row=0))
