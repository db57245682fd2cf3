"""Locate ``corpusctl.toml``.

Lookup order: the ``CORPUSCTL_CONFIG`` env var, then the first
``corpusctl.toml`` found walking up from the start directory (the way git
finds ``.git/``). ``--config`` bypasses discovery entirely.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "corpusctl.toml"
CONFIG_ENV_VAR = "CORPUSCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None.

    A ``CORPUSCTL_CONFIG`` that names a missing file disables discovery
    rather than falling back to the walk-up.
    """
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
