"""Expression parsing and evaluation over grid references.

Grammar::

    expr := expr ('+' | '-' | '*' | '/') expr
          | identifier
          | numeric-literal
          | '(' expr ')'

The text after ``=`` is parsed with Python's own expression grammar
(``ast.parse(mode="eval")``), which already gives conventional precedence
and left associativity, then narrowed to a small internal tree:
``Literal | Reference | BinaryOp``. The tree never leaves this module's
callers; it is discarded once the value is computed.

INVARIANT: Every referenced cell must already be terminal (Text or
Number). Evaluation is row-major with no memoization.
"""

from __future__ import annotations

import ast
import math
import operator
from collections.abc import Callable
from dataclasses import dataclass

from pipecalc.domain.addresses import Address, lookup, parse_address, position_label
from pipecalc.domain.cells import (
    DEFAULT_NUMBER_FORMAT,
    Cell,
    CellKind,
    Grid,
    cell_value,
    format_number,
)
from pipecalc.domain.errors import (
    GridError,
    InvalidAddressError,
    InvalidReferenceError,
    OutOfBoundsError,
    TypeMismatchError,
    UnsupportedSyntaxError,
)

# ---------------------------------------------------------------------------
# Expression tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """Numeric literal."""

    value: float


@dataclass(frozen=True)
class Reference:
    """Cell reference such as ``B3``."""

    address: Address
    identifier: str


@dataclass(frozen=True)
class BinaryOp:
    """One of ``+ - * /`` applied to two subtrees."""

    op: str
    left: Node
    right: Node


Node = Literal | Reference | BinaryOp


def _divide(lhs: float, rhs: float) -> float:
    """IEEE 754 division: ``x/0`` is signed infinity, ``0/0`` is NaN."""
    try:
        return lhs / rhs
    except ZeroDivisionError:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)


_AST_OPERATORS: dict[type[ast.operator], str] = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
}

_APPLY: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
}

# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _numeric_constant(node: ast.expr) -> float | None:
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return float(node.value)
    return None


def _operator_symbol(node: ast.BinOp, source: str) -> str:
    symbol = _AST_OPERATORS.get(type(node.op))
    if symbol is None:
        raise UnsupportedSyntaxError(
            f"Operator {type(node.op).__name__} is not supported in {source!r}",
            expression=source,
        )
    return symbol


def _convert(root: ast.expr, source: str) -> Node:
    """Narrow a Python expression tree, left operand first.

    Uses an explicit stack: ``A0+A0+...`` is left-deep, one level per term.
    """
    converted: list[Node] = []
    # (node, symbol): a symbol marks a BinOp whose operands are converted.
    pending: list[tuple[ast.expr, str | None]] = [(root, None)]
    while pending:
        node, symbol = pending.pop()
        if symbol is not None:
            right = converted.pop()
            left = converted.pop()
            converted.append(BinaryOp(symbol, left, right))
        elif isinstance(node, ast.BinOp):
            pending.append((node, _operator_symbol(node, source)))
            pending.append((node.right, None))
            pending.append((node.left, None))
        else:
            converted.append(_convert_operand(node, source))
    return converted[0]


def _convert_operand(node: ast.expr, source: str) -> Node:
    if isinstance(node, ast.Name):
        try:
            address = parse_address(node.id)
        except InvalidAddressError as exc:
            raise InvalidReferenceError(
                f"Invalid cell reference {node.id!r} in {source!r}",
                identifier=node.id,
                reason=exc.code,
            ) from exc
        return Reference(address, node.id)

    value = _numeric_constant(node)
    if value is not None:
        return Literal(value)

    # A sign is allowed only directly on a numeric literal.
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.USub, ast.UAdd)):
        operand = _numeric_constant(node.operand)
        if operand is not None:
            return Literal(-operand if isinstance(node.op, ast.USub) else operand)

    raise UnsupportedSyntaxError(
        f"Unsupported syntax ({type(node).__name__}) in {source!r}",
        expression=source,
    )


def parse_expression(source: str) -> Node:
    """Parse an arithmetic expression (without the leading ``=``).

    Raises:
        UnsupportedSyntaxError: Anything outside the four-operator grammar.
        InvalidReferenceError: An identifier is not a valid cell address.
    """
    text = source.strip()
    if not text:
        raise UnsupportedSyntaxError("Empty expression", expression=source)
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as exc:
        raise UnsupportedSyntaxError(
            f"Cannot parse expression {text!r}: {exc.msg}",
            expression=text,
        ) from None
    except RecursionError:
        raise UnsupportedSyntaxError(
            "Expression too deeply nested",
            expression=text,
        ) from None
    return _convert(tree.body, text)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def _reference_value(grid: Grid, ref: Reference) -> float:
    try:
        cell = lookup(grid, ref.address)
    except OutOfBoundsError as exc:
        raise InvalidReferenceError(
            f"Reference {ref.identifier} is outside the grid",
            identifier=ref.identifier,
            reason=exc.code,
        ) from exc

    if cell.kind is CellKind.NUMBER:
        return cell_value(cell)
    if cell.kind in (CellKind.EXPRESSION, CellKind.CLONE):
        raise TypeMismatchError(
            f"Reference {ref.identifier} points at an unevaluated {cell.kind} cell",
            identifier=ref.identifier,
            kind=str(cell.kind),
        )
    raise TypeMismatchError(
        f"Reference {ref.identifier} points at a {cell.kind} cell, not a number",
        identifier=ref.identifier,
        kind=str(cell.kind),
    )


def evaluate_node(node: Node, grid: Grid) -> float:
    """Evaluate an expression tree against *grid*, left operand first."""
    values: list[float] = []
    pending: list[tuple[Node, bool]] = [(node, False)]
    while pending:
        current, operands_done = pending.pop()
        if isinstance(current, Literal):
            values.append(current.value)
        elif isinstance(current, Reference):
            values.append(_reference_value(grid, current))
        elif operands_done:
            rhs = values.pop()
            lhs = values.pop()
            values.append(_APPLY[current.op](lhs, rhs))
        else:
            pending.append((current, True))
            pending.append((current.right, False))
            pending.append((current.left, False))
    return values[0]


def evaluate_expression(formula: str, grid: Grid) -> float:
    """Evaluate an expression cell's content, e.g. ``"=A1+B1"``."""
    return evaluate_node(parse_expression(formula.removeprefix("=")), grid)


def evaluate_grid(grid: Grid, number_format: str = DEFAULT_NUMBER_FORMAT) -> int:
    """Evaluate every expression cell in place, row-major. Returns the count.

    Each result replaces its cell as a Number formatted with *number_format*.
    Errors are annotated with the position of the failing cell.
    """
    evaluated = 0
    for row_idx, row in enumerate(grid):
        for col_idx, cell in enumerate(row):
            if cell.kind is CellKind.CLONE:
                raise TypeMismatchError(
                    f"Clone at {position_label(row_idx, col_idx)} was not resolved"
                    " before evaluation",
                    cell=position_label(row_idx, col_idx),
                )
            if cell.kind is not CellKind.EXPRESSION:
                continue
            try:
                value = evaluate_expression(cell.content, grid)
            except GridError as exc:
                exc.detail.setdefault("expression", cell.content)
                exc.at_cell(position_label(row_idx, col_idx))
                raise
            row[col_idx] = Cell(format_number(value, number_format), CellKind.NUMBER)
            evaluated += 1
    return evaluated
