"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pipecalc.toml only contains
overrides. An empty file (or no file at all) means ``%.2f`` numbers and
plain ``|`` output.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator

from pipecalc.domain.cells import DEFAULT_NUMBER_FORMAT, format_number, parse_number

# Values a number format must render as parseable text. Division by zero
# and ``inf``/``nan`` literals reach the formatter too.
_FORMAT_PROBES = (1.5, math.inf, -math.inf, math.nan)


class FormatConfig(BaseModel):
    """[format] section."""

    model_config = {"frozen": True}

    number: str = DEFAULT_NUMBER_FORMAT

    @field_validator("number")
    @classmethod
    def _renders_parseable_numbers(cls, value: str) -> str:
        """Literals and results are re-parsed, so formatted text must stay numeric."""
        for probe in _FORMAT_PROBES:
            try:
                rendered = format_number(probe, value)
            except (TypeError, ValueError, OverflowError) as exc:
                msg = f"invalid printf-style number format {value!r} for {probe!r}: {exc}"
                raise ValueError(msg) from exc
            if parse_number(rendered) is None:
                msg = f"number format {value!r} renders {rendered!r}, which is not a number"
                raise ValueError(msg)
        return value


class RenderConfig(BaseModel):
    """[render] section."""

    model_config = {"frozen": True}

    pretty: bool = False
    pad: bool = False


class PipecalcConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    format: FormatConfig = Field(default_factory=FormatConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
