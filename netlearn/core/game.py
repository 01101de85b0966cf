"""Top-level controller: owns the stores and exposes the game to the UI."""

from __future__ import annotations

import logging
from typing import List, Optional

from netlearn.core import unlock
from netlearn.core.badges import all_badges, derive_badges
from netlearn.core.catalog import CatalogRepository
from netlearn.core.completions import CompletionCounterStore
from netlearn.core.feedback import FeedbackEvent, FeedbackNotifier, safe_notify
from netlearn.core.progress import GameProgress, ProgressStore
from netlearn.core.session import LevelOutcome, LevelSession, Phase

logger = logging.getLogger(__name__)


class GameController:
    """Read accessors and actions for the UI layer.

    ``unlock_all`` opens every level and section for testing content; it
    does not touch stored progress.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        progress_store: ProgressStore,
        completion_store: CompletionCounterStore,
        notifier: Optional[FeedbackNotifier] = None,
        unlock_all: bool = False,
    ) -> None:
        self._catalog = catalog
        self._progress_store = progress_store
        self._completion_store = completion_store
        self._notifier = notifier
        self._unlock_all = unlock_all
        self._session: Optional[LevelSession] = None

    @property
    def catalog(self) -> CatalogRepository:
        return self._catalog

    @property
    def progress(self) -> GameProgress:
        return self._progress_store.progress

    @property
    def is_loaded(self) -> bool:
        return self._progress_store.is_loaded

    @property
    def active_session(self) -> Optional[LevelSession]:
        return self._session

    def is_level_unlocked(self, level_id: int) -> bool:
        return self._unlock_all or unlock.is_level_unlocked(level_id, self.progress)

    def is_level_completed(self, level_id: int) -> bool:
        return self._progress_store.is_level_completed(level_id)

    def is_section_unlocked(self, section_id: int) -> bool:
        return self._unlock_all or unlock.is_section_unlocked(section_id, self.progress, self._catalog)

    def get_progress_percentage(self) -> int:
        return unlock.progress_percentage(self.progress, self._catalog)

    def get_section_progress(self, section_id: int) -> int:
        section = self._catalog.get_section(section_id)
        return unlock.section_progress(section.level_ids, self.progress)

    def get_completion_count(self, level_id: int) -> int:
        return self._completion_store.get(level_id)

    def all_badges(self) -> List[str]:
        return all_badges(self._catalog.list_sections())

    # -- actions ---------------------------------------------------------

    def complete_level(self, level_id: int, score_delta: int) -> List[str]:
        """Record a finished level and award any badges it completes.

        Returns the badges earned by this call.
        """
        progress = self._progress_store.complete_level(level_id, score_delta)
        logger.info(
            "Level %s completed (+%s, total %s)", level_id, score_delta, progress.total_score
        )
        new_badges = [
            badge
            for badge in derive_badges(progress.completed_levels, self._catalog.list_sections())
            if self._progress_store.add_badge(badge)
        ]
        for badge in new_badges:
            logger.info("Badge earned: %s", badge)
        if new_badges:
            safe_notify(self._notifier, FeedbackEvent.UNLOCK)
        return new_badges

    def add_badge(self, name: str) -> bool:
        return self._progress_store.add_badge(name)

    def increment_completion(self, level_id: int) -> int:
        return self._completion_store.increment(level_id)

    def reset_progress(self) -> None:
        self._session = None
        self._progress_store.reset()
        self._completion_store.reset()
        logger.info("Progress reset")

    # -- play-throughs ---------------------------------------------------

    def start_level(self, level_id: int) -> Optional[LevelSession]:
        """Open a play-through. Returns None (and changes nothing) if locked."""
        level = self._catalog.get_level(level_id)
        if not self.is_level_unlocked(level_id):
            logger.debug("Level %s is locked", level_id)
            return None
        self._session = LevelSession(level, notifier=self._notifier)
        return self._session

    def finish_level(self, session: LevelSession) -> Optional[LevelOutcome]:
        """Apply a finished session's outcome to the stores and discard it.

        Every completion is recorded with its score; the completion counter
        only moves when the level was passed.
        """
        if session is not self._session or session.phase is not Phase.OUTCOME:
            return None
        outcome = session.outcome
        if outcome is None:
            return None
        self._session = None
        if outcome.passed:
            self.increment_completion(outcome.level_id)
        self.complete_level(outcome.level_id, outcome.score_delta)
        return outcome

    def abandon_level(self) -> None:
        """Leave the active play-through without recording anything."""
        self._session = None
