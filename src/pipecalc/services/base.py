"""BaseService — shared foundation for pipecalc services.

Every service receives the run's :class:`PipecalcSettings` at
construction time and reads formats and flags from it.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pipecalc.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pipecalc.config.settings import PipecalcSettings
    from pipecalc.domain.errors import GridError


class BaseService:
    """Base for service-layer classes.

    Usage::

        class GridService(BaseService):
            def evaluate_text(self, text: str) -> ServiceResult:
                number_format = self._settings.number_format
                ...
    """

    def __init__(self, settings: PipecalcSettings) -> None:
        self._settings = settings

    @staticmethod
    def _failure(op: str, exc: GridError) -> ServiceResult:
        """Convert a domain error into a failed result."""
        cell = exc.detail.get("cell")
        message = exc.message
        if cell and not re.search(rf"\b{re.escape(cell)}\b", message):
            message = f"{cell}: {message}"
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=message, detail=exc.detail),
        )
