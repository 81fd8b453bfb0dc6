"""Tests for PipecalcSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from pipecalc.config.settings import PipecalcSettings


class TestPipecalcSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = PipecalcSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.debug is False
        assert settings.number_format == "%.2f"
        assert settings.render.pretty is False
        assert settings.render.pad is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PipecalcSettings.from_cli(start=tmp_path)
        with pytest.raises(ValidationError):
            settings.debug = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "pipecalc.toml"
        toml.write_text('[format]\nnumber = "%.3f"\n[render]\npretty = true\n')
        settings = PipecalcSettings.from_cli(start=tmp_path)
        assert settings.number_format == "%.3f"
        assert settings.render.pretty is True
        assert settings.render.pad is False  # default preserved
        assert settings.config_path == toml

    def test_discovered_from_parent(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text("[render]\npad = true\n")
        child = tmp_path / "sheets" / "q3"
        child.mkdir(parents=True)
        settings = PipecalcSettings.from_cli(start=child)
        assert settings.render.pad is True

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text("")
        settings = PipecalcSettings.from_cli(start=tmp_path)
        assert settings.number_format == "%.2f"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "calc.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[format]\nnumber = "%.0f"\n')
        settings = PipecalcSettings.from_cli(config_path=str(custom), start=tmp_path)
        assert settings.number_format == "%.0f"
        assert settings.config_path == custom

    def test_explicit_missing_path_means_no_config(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text('[format]\nnumber = "%.0f"\n')
        settings = PipecalcSettings.from_cli(
            config_path=str(tmp_path / "missing.toml"), start=tmp_path
        )
        assert settings.config_path is None
        assert settings.number_format == "%.2f"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text("[format\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PipecalcSettings.from_cli(start=tmp_path)

    def test_unparseable_format_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text('[format]\nnumber = "$%.2f"\n')
        with pytest.raises(ValidationError):
            PipecalcSettings.from_cli(start=tmp_path)


class TestCliFlags:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = PipecalcSettings.from_cli(
            start=tmp_path,
            json_output=True,
            verbose=True,
            debug=True,
        )
        assert settings.json_output is True
        assert settings.verbose is True
        assert settings.debug is True

    def test_format_flag_overrides_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text('[format]\nnumber = "%.3f"\n')
        settings = PipecalcSettings.from_cli(start=tmp_path, number_format="%.1f")
        assert settings.number_format == "%.1f"

    def test_render_flags_switch_on(self, tmp_path: Path) -> None:
        settings = PipecalcSettings.from_cli(start=tmp_path, pretty=True, pad=True)
        assert settings.render.pretty is True
        assert settings.render.pad is True

    def test_render_flags_off_defer_to_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pipecalc.toml").write_text("[render]\npretty = true\n")
        settings = PipecalcSettings.from_cli(start=tmp_path, pretty=False, pad=True)
        assert settings.render.pretty is True
        assert settings.render.pad is True


class TestEnvVars:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pipecalc.toml").write_text('[format]\nnumber = "%.3f"\n')
        monkeypatch.setenv("PIPECALC_FORMAT__NUMBER", "%.4f")
        settings = PipecalcSettings.from_cli(start=tmp_path)
        assert settings.number_format == "%.4f"

    def test_cli_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PIPECALC_FORMAT__NUMBER", "%.4f")
        settings = PipecalcSettings.from_cli(start=tmp_path, number_format="%.1f")
        assert settings.number_format == "%.1f"

    def test_env_boolean(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PIPECALC_DEBUG", "true")
        settings = PipecalcSettings.from_cli(start=tmp_path)
        assert settings.debug is True

    def test_pinned_config_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        pinned = tmp_path / "elsewhere.toml"
        pinned.write_text("[render]\npad = true\n")
        monkeypatch.setenv("PIPECALC_CONFIG", str(pinned))
        settings = PipecalcSettings.from_cli(start=tmp_path)
        assert settings.config_path == pinned
        assert settings.render.pad is True
