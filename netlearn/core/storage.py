"""Per-device key/text storage used by the progress and completion stores."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """Synchronous key -> text store."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored text for key, or None if absent/unreadable."""

    @abstractmethod
    def write(self, key: str, text: str) -> None:
        """Store text under key, replacing any previous value."""


class MemoryStorage(KeyValueStorage):
    """In-process storage; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, text: str) -> None:
        self._data[key] = text


class JsonFileStorage(KeyValueStorage):
    """Stores each key as ``<directory>/<key>.json``.

    Read and write failures are logged and degrade to "absent" / "not saved";
    they never propagate to the caller.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    def write(self, key: str, text: str) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save %s: %s", path, e)
