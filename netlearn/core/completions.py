from __future__ import annotations

import json
import logging
from typing import Dict

from netlearn.core.config import COMPLETIONS_KEY
from netlearn.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class CompletionCounterStore:
    """Counts how many times each level has been passed. Counters only grow,
    except through ``reset``."""

    def __init__(self, storage: KeyValueStorage, key: str = COMPLETIONS_KEY) -> None:
        self._storage = storage
        self._key = key
        self._counts = self._load()

    @property
    def counts(self) -> Dict[int, int]:
        return dict(self._counts)

    def get(self, level_id: int) -> int:
        return self._counts.get(level_id, 0)

    def increment(self, level_id: int) -> int:
        self._counts[level_id] = self._counts.get(level_id, 0) + 1
        self._save()
        return self._counts[level_id]

    def reset(self) -> None:
        self._counts = {}
        self._save()

    def _load(self) -> Dict[int, int]:
        text = self._storage.read(self._key)
        if text is None:
            return {}
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError) as e:
            logger.warning("Could not parse completion counts: %s", e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring completion counts of type %s", type(payload).__name__)
            return {}

        counts: Dict[int, int] = {}
        for key, value in payload.items():
            try:
                level_id, count = int(key), int(value)
            except (TypeError, ValueError, OverflowError):
                logger.warning("Skipping bad completion entry %r: %r", key, value)
                continue
            if count > 0:
                counts[level_id] = count
        return counts

    def _save(self) -> None:
        payload = {str(level_id): count for level_id, count in sorted(self._counts.items())}
        self._storage.write(self._key, json.dumps(payload, indent=2))
