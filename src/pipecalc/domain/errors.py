"""Grid evaluation errors.

INVARIANT: Every error is terminal. The pipeline has no partial-recovery
mode; the service layer turns a GridError into a failed ServiceResult
and nothing is rendered.

Each subclass carries a stable ``code`` (surfaced as ``ServiceError.code``)
and a ``detail`` dict naming the offending identifier or cell position.
"""

from __future__ import annotations

from typing import Any


class GridError(Exception):
    """Base class for all pipeline failures."""

    code = "GRID_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail

    def at_cell(self, cell: str) -> None:
        """Attach the position of the cell being processed, keeping any existing one."""
        self.detail.setdefault("cell", cell)


class InvalidAddressError(GridError):
    """Identifier is not ``<UppercaseLetter><NonNegativeInteger>``."""

    code = "INVALID_ADDRESS"


class OutOfBoundsError(GridError):
    """Address, clone source, or shifted reference lies outside the grid."""

    code = "OUT_OF_BOUNDS"


class TypeMismatchError(GridError):
    """A non-numeric cell was used where a number was required."""

    code = "TYPE_MISMATCH"


class UnsupportedSyntaxError(GridError):
    """Expression uses grammar beyond the four binary operators."""

    code = "UNSUPPORTED_SYNTAX"


class MalformedCloneError(GridError):
    """Clone directive has no recognizable direction or cannot be resolved."""

    code = "MALFORMED_CLONE"


class InvalidReferenceError(GridError):
    """Expression identifier is malformed or points outside the grid."""

    code = "INVALID_REFERENCE"
