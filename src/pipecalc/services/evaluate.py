"""GridService — the classify → clone → evaluate pipeline.

Extends BaseService. The grid is created, mutated in place, and
discarded inside one call; callers only ever see content strings.

Stages run strictly in order and each runs to completion over the
whole grid before the next one starts. Any GridError aborts the run
and the result carries the error only.
"""

from __future__ import annotations

import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

from pipecalc.domain.cells import Grid, grid_contents, parse_grid
from pipecalc.domain.clones import resolve_clones
from pipecalc.domain.errors import GridError
from pipecalc.domain.expressions import evaluate_grid
from pipecalc.infrastructure.filesystem import read_grid_file
from pipecalc.services.base import BaseService
from pipecalc.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)

OP_EVALUATE = "evaluate"


@contextmanager
def _stage(timings: dict[str, float], name: str) -> Generator[None]:
    """Record the wall time of one pipeline stage in milliseconds."""
    start = time.perf_counter()
    try:
        yield
    finally:
        timings[name] = round((time.perf_counter() - start) * 1000, 3)


def _column_count(grid: Grid) -> int:
    return len(grid[0]) if grid else 0


def _ragged_rows(grid: Grid) -> list[str]:
    """Warnings for rows whose width differs from the first row."""
    expected = _column_count(grid)
    return [
        f"Row {idx} has {len(row)} cells, expected {expected}"
        for idx, row in enumerate(grid)
        if len(row) != expected
    ]


def _cell_payload(grid: Grid) -> list[list[dict[str, str]]]:
    return [[{"content": cell.content, "kind": str(cell.kind)} for cell in row] for row in grid]


class GridService(BaseService):
    """Evaluate pipe-delimited grids."""

    def evaluate_text(self, text: str, *, source: str | None = None) -> ServiceResult:
        """Run the whole pipeline over grid *text*.

        On success ``data`` holds the resolved ``rows`` plus counts; with
        ``settings.debug`` it also holds ``intermediate``, the grid as it
        stood after clone resolution.
        """
        number_format = self._settings.number_format
        timings: dict[str, float] = {}
        log = logger.bind(source=source)
        intermediate: list[list[dict[str, str]]] | None = None

        try:
            with _stage(timings, "classify"):
                grid = parse_grid(text, number_format)
            log.debug("grid.classified", rows=len(grid), columns=_column_count(grid))

            with _stage(timings, "clones"):
                clones = resolve_clones(grid)
            log.debug("grid.clones_resolved", count=clones)
            if self._settings.debug:
                intermediate = _cell_payload(grid)

            with _stage(timings, "evaluate"):
                evaluated = evaluate_grid(grid, number_format)
            log.debug("grid.evaluated", count=evaluated)
        except GridError as exc:
            log.debug("grid.failed", code=exc.code, detail=exc.detail)
            return self._failure(OP_EVALUATE, exc)

        data: dict[str, Any] = {
            "source": source,
            "rows": grid_contents(grid),
            "row_count": len(grid),
            "column_count": _column_count(grid),
            "clones_resolved": clones,
            "expressions_evaluated": evaluated,
        }
        if intermediate is not None:
            data["intermediate"] = intermediate

        return ServiceResult(
            ok=True,
            op=OP_EVALUATE,
            data=data,
            warnings=_ragged_rows(grid),
            meta={"timings_ms": timings},
        )

    def evaluate_file(self, path: Path) -> ServiceResult:
        """Read *path* as UTF-8 and evaluate it."""
        try:
            text = read_grid_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            reason = getattr(exc, "strerror", None) or str(exc)
            return ServiceResult(
                ok=False,
                op=OP_EVALUATE,
                error=ServiceError(
                    code="READ_FAILED",
                    message=f"Cannot read {path}: {reason}",
                    detail={"path": str(path)},
                ),
            )
        return self.evaluate_text(text, source=str(path))
