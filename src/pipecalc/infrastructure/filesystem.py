"""Filesystem operations for grid input files.

Grids are UTF-8 text. A leading BOM written by some editors is dropped
so the first cell classifies the same as it would without it.
"""

from __future__ import annotations

from pathlib import Path

GRID_ENCODING = "utf-8-sig"


def read_grid_file(path: Path) -> str:
    """Read a grid file and return its text."""
    return path.read_text(encoding=GRID_ENCODING)
