from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

from netlearn.core.config import PROGRESS_KEY
from netlearn.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameProgress:
    """Snapshot of the learner's progress."""

    completed_levels: FrozenSet[int] = field(default_factory=frozenset)
    current_level: int = 1
    total_score: int = 0
    badges: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completedLevels": sorted(self.completed_levels),
            "currentLevel": self.current_level,
            "totalScore": self.total_score,
            "badges": list(self.badges),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GameProgress":
        """Build from a decoded record. Bad fields fall back to their defaults."""
        default = cls()
        completed = payload.get("completedLevels", [])
        try:
            if not isinstance(completed, list):
                raise TypeError(type(completed).__name__)
            completed_levels = frozenset(int(v) for v in completed)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring bad completedLevels: %r", completed)
            completed_levels = default.completed_levels

        current_level = _non_negative_int(payload.get("currentLevel"), default.current_level)
        current_level = max(current_level, 1)
        total_score = _non_negative_int(payload.get("totalScore"), default.total_score)

        badges_raw = payload.get("badges", [])
        badges: Tuple[str, ...] = default.badges
        if isinstance(badges_raw, list):
            seen: list[str] = []
            for badge in badges_raw:
                if isinstance(badge, str) and badge not in seen:
                    seen.append(badge)
            badges = tuple(seen)
        else:
            logger.warning("Ignoring bad badges: %r", badges_raw)

        return cls(
            completed_levels=completed_levels,
            current_level=current_level,
            total_score=total_score,
            badges=badges,
        )


def _non_negative_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring bad progress value: %r", value)
        return default
    return number if number >= 0 else default


class ProgressStore:
    """Stores completed levels, score and badges. Persisted after every change.
    Cleared only when the learner resets progress."""

    def __init__(self, storage: KeyValueStorage, key: str = PROGRESS_KEY) -> None:
        self._storage = storage
        self._key = key
        self._loaded = False
        self._progress = self._load()
        self._loaded = True

    @property
    def progress(self) -> GameProgress:
        return self._progress

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def is_level_completed(self, level_id: int) -> bool:
        return level_id in self._progress.completed_levels

    def complete_level(self, level_id: int, score_delta: int) -> GameProgress:
        """Record a finished play-through of ``level_id``.

        Membership is idempotent, the score is added on every call (replays
        still score), and ``current_level`` only moves forward.
        """
        if score_delta < 0:
            raise ValueError(f"score_delta must be non-negative, got {score_delta}")
        p = self._progress
        self._progress = GameProgress(
            completed_levels=p.completed_levels | {level_id},
            current_level=max(p.current_level, level_id + 1),
            total_score=p.total_score + score_delta,
            badges=p.badges,
        )
        self._save()
        return self._progress

    def add_badge(self, name: str) -> bool:
        """Add a badge. Returns False if it was already held."""
        if name in self._progress.badges:
            return False
        p = self._progress
        self._progress = GameProgress(
            completed_levels=p.completed_levels,
            current_level=p.current_level,
            total_score=p.total_score,
            badges=p.badges + (name,),
        )
        self._save()
        return True

    def reset(self) -> None:
        self._progress = GameProgress()
        self._save()

    def _load(self) -> GameProgress:
        text = self._storage.read(self._key)
        if text is None:
            return GameProgress()
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError) as e:
            logger.warning("Could not parse progress: %s", e)
            return GameProgress()
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress record of type %s", type(payload).__name__)
            return GameProgress()
        return GameProgress.from_dict(payload)

    def _save(self) -> None:
        self._storage.write(self._key, json.dumps(self._progress.to_dict(), indent=2))
