"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PIPECALC_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``pipecalc.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Nested sections merge per key across sources, so ``--format %.3f`` only
replaces ``format.number`` and leaves the rest of the TOML intact.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pipecalc.config.discovery import find_config
from pipecalc.config.models import FormatConfig, RenderConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered or explicit ``pipecalc.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class PipecalcSettings(BaseSettings):
    """Everything one evaluation run needs to know, frozen.

    Stored on the :class:`~pipecalc.commands._context.AppContext` created
    by the root command.

    Attributes:
        config_path: The TOML file that was loaded, or None.
        debug: Dump the grid after clone resolution to stderr.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PIPECALC_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False
    debug: bool = False

    # --- TOML sections ---
    format: FormatConfig = Field(default_factory=FormatConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @property
    def number_format(self) -> str:
        return self.format.number

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        number_format: str | None = None,
        pretty: bool = False,
        pad: bool = False,
        **cli_flags: Any,
    ) -> PipecalcSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given, otherwise discovers ``pipecalc.toml``
        walking up from *start* (the input file's directory). Render flags
        only switch features on; leaving them off defers to config.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        overrides: dict[str, Any] = dict(cli_flags)
        if number_format is not None:
            overrides["format"] = {"number": number_format}
        render: dict[str, bool] = {}
        if pretty:
            render["pretty"] = True
        if pad:
            render["pad"] = True
        if render:
            overrides["render"] = render

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
