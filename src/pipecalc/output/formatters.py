"""ServiceResult formatting for the CLI.

Humans get the rendered grid (or a Rich-styled error line); machines
get the full ServiceResult as JSON with ``--json``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pipecalc.output.renderers import render_error, render_grid

if TYPE_CHECKING:
    from pipecalc.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be presented."""

    json_output: bool = False
    verbose: bool = False
    pretty: bool = False
    pad: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    Successful human output is exactly the rendered grid, so it can be
    fed back in as input.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if not result.ok:
        return render_error(result, verbose=settings.verbose)
    return render_grid(result.data.get("rows", []), pretty=settings.pretty, pad=settings.pad)
