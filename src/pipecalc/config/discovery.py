"""Config file discovery.

pipecalc.toml is looked up next to the grid being evaluated first, then
in each parent directory. PIPECALC_CONFIG pins an explicit file instead.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pipecalc.toml"
CONFIG_ENV_VAR = "PIPECALC_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest pipecalc.toml at or above *start* (default: cwd).

    When PIPECALC_CONFIG is set, only that path is considered; a missing
    file there means no config rather than falling back to the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        return pinned if pinned.is_file() else None

    origin = (start or Path.cwd()).resolve()
    if origin.is_file():
        origin = origin.parent
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
