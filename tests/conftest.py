"""Shared pytest fixtures for pipecalc tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from pipecalc.config.settings import PipecalcSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PIPECALC_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("PIPECALC_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore logger state after each test.

    The CLI installs a stderr handler; under CliRunner that stream is
    closed once the invocation ends.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("pipecalc")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings(tmp_path: Path) -> PipecalcSettings:
    """Default settings, isolated from any pipecalc.toml above the test."""
    return PipecalcSettings.from_cli(start=tmp_path)


@pytest.fixture
def write_grid(tmp_path: Path) -> Callable[..., Path]:
    """Write grid text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "sheet.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write

