"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from pipecalc.config.models import FormatConfig, PipecalcConfig, RenderConfig


class TestFormatConfig:
    def test_default(self) -> None:
        assert FormatConfig().number == "%.2f"

    @pytest.mark.parametrize("fmt", ["%.0f", "%.4f", "%g", "%e", "%10.3f"])
    def test_accepts_numeric_formats(self, fmt: str) -> None:
        assert FormatConfig(number=fmt).number == fmt

    @pytest.mark.parametrize("fmt", ["%s%%", "$%.2f", "%.2f USD", "%x", "%d%d", "{:.2f}"])
    def test_rejects_formats(self, fmt: str) -> None:
        with pytest.raises(ValidationError):
            FormatConfig(number=fmt)

    @pytest.mark.parametrize("fmt", ["%d", "%i", "%5d", "%.0d"])
    def test_rejects_integer_formats(self, fmt: str) -> None:
        """Integer conversions cannot render inf or nan results."""
        with pytest.raises(ValidationError, match="invalid printf-style number format"):
            FormatConfig(number=fmt)


class TestRenderConfig:
    def test_defaults(self) -> None:
        render = RenderConfig()
        assert render.pretty is False
        assert render.pad is False


class TestPipecalcConfig:
    def test_sections(self) -> None:
        config = PipecalcConfig.model_validate({"render": {"pad": True}})
        assert config.render.pad is True
        assert config.format.number == "%.2f"

    def test_frozen(self) -> None:
        config = PipecalcConfig()
        with pytest.raises(ValidationError):
            config.render = RenderConfig(pretty=True)  # type: ignore[misc]
