"""Configuration constants and environment settings for NetLearn."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Scoring
POINTS_PER_CORRECT_PASSED = 20  # per correct answer when the level is passed
POINTS_PER_CORRECT_FAILED = 15  # per correct answer when the level is failed

# Storage keys (one record per key)
PROGRESS_KEY = "networklearn_progress"
COMPLETIONS_KEY = "networklearn_completions"

# Badge awarded once every level of every section is completed
GRAND_BADGE = "Grand Master"

DEFAULT_HOME = Path.home() / ".netlearn"
DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.yaml"


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""

    home: Path = DEFAULT_HOME
    catalog_path: Path = DEFAULT_CATALOG
    unlock_all: bool = False
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        home = env.get("NETLEARN_HOME")
        catalog = env.get("NETLEARN_CATALOG")
        level_name = env.get("NETLEARN_LOG_LEVEL", "INFO").strip().upper()
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            log_level = logging.INFO
        return cls(
            home=Path(home).expanduser() if home else DEFAULT_HOME,
            catalog_path=Path(catalog).expanduser() if catalog else DEFAULT_CATALOG,
            unlock_all=env.get("NETLEARN_UNLOCK_ALL") == "1",
            log_level=log_level,
        )
