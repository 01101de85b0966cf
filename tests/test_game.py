"""Tests for netlearn.core.game – the controller the UI talks to."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from conftest import RecordingNotifier
from netlearn.core.catalog import CatalogRepository
from netlearn.core.completions import CompletionCounterStore
from netlearn.core.config import GRAND_BADGE
from netlearn.core.feedback import FeedbackEvent
from netlearn.core.game import GameController
from netlearn.core.progress import GameProgress, ProgressStore
from netlearn.core.session import LevelOutcome, Phase
from netlearn.core.storage import JsonFileStorage


def _play_level(game: GameController, level_id: int, answers: Sequence[int]) -> LevelOutcome:
    session = game.start_level(level_id)
    assert session is not None
    session.begin_quiz()
    for answer in answers:
        session.select(answer)
        session.submit()
        session.advance()
    outcome = game.finish_level(session)
    assert outcome is not None
    return outcome


def _pass(game: GameController, level_id: int) -> LevelOutcome:
    n = len(game.catalog.get_level(level_id).questions)
    return _play_level(game, level_id, [0] * n)


def _fail(game: GameController, level_id: int) -> LevelOutcome:
    n = len(game.catalog.get_level(level_id).questions)
    return _play_level(game, level_id, [1] * n)


# ---------------------------------------------------------------------------
# Read accessors
# ---------------------------------------------------------------------------

class TestFreshGame:
    def test_defaults(self, game: GameController):
        assert game.is_loaded
        assert game.progress == GameProgress()
        assert game.get_progress_percentage() == 0

    def test_only_first_level_and_section_open(self, game: GameController):
        assert game.is_level_unlocked(1)
        assert not game.is_level_unlocked(2)
        assert game.is_section_unlocked(1)
        assert not game.is_section_unlocked(2)

    def test_all_badges(self, game: GameController):
        assert game.all_badges() == ["Basics Badge", "Advanced Badge", GRAND_BADGE]


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------

class TestEndToEnd:
    def test_four_of_six_correct(self, game: GameController):
        outcome = _play_level(game, 1, [0, 0, 0, 0, 1, 1])
        assert outcome.passed
        assert outcome.score_delta == 80
        assert game.is_level_unlocked(2)
        assert game.get_completion_count(1) == 1
        assert game.progress.total_score == 80
        assert game.progress.current_level == 2
        assert game.active_session is None

    def test_failed_attempt_still_completes(self, game: GameController):
        outcome = _play_level(game, 1, [0, 0, 1, 1, 1, 1])
        assert not outcome.passed
        assert outcome.score_delta == 30
        assert game.is_level_completed(1)
        assert game.is_level_unlocked(2)
        assert game.progress.total_score == 30

    def test_counter_only_on_pass(self, game: GameController):
        _fail(game, 1)
        assert game.get_completion_count(1) == 0
        _pass(game, 1)
        assert game.get_completion_count(1) == 1

    def test_replay_scores_again(self, game: GameController):
        _pass(game, 1)
        _pass(game, 1)
        assert game.progress.completed_levels == {1}
        assert game.progress.total_score == 240
        assert game.get_completion_count(1) == 2

    def test_replay_never_removes_progress(self, game: GameController):
        _pass(game, 1)
        _fail(game, 1)
        assert game.is_level_completed(1)
        assert game.get_completion_count(1) == 1

    def test_section_unlock_and_badges(self, game: GameController, notifier: RecordingNotifier):
        for level_id in (1, 2, 3):
            _pass(game, level_id)
        assert game.is_section_unlocked(2)
        assert game.progress.badges == ("Basics Badge",)
        assert FeedbackEvent.UNLOCK in notifier.events
        for level_id in (4, 5):
            _pass(game, level_id)
        assert game.progress.badges == ("Basics Badge", "Advanced Badge", GRAND_BADGE)
        assert game.get_progress_percentage() == 100
        assert game.get_section_progress(2) == 100


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class TestActions:
    def test_complete_level_returns_new_badges(self, game: GameController):
        assert game.complete_level(1, 10) == []
        assert game.complete_level(2, 10) == []
        assert game.complete_level(3, 10) == ["Basics Badge"]
        assert game.complete_level(3, 10) == []
        assert game.progress.badges == ("Basics Badge",)

    def test_add_badge(self, game: GameController):
        assert game.add_badge("Extra")
        assert not game.add_badge("Extra")

    def test_increment_completion(self, game: GameController):
        assert game.increment_completion(4) == 1
        assert game.get_completion_count(4) == 1

    def test_monotonic_over_a_sequence(self, game: GameController):
        before = game.progress
        for level_id, passed in [(1, False), (2, True), (1, True), (3, False), (2, False)]:
            (_pass if passed else _fail)(game, level_id)
            after = game.progress
            assert after.current_level >= before.current_level
            assert after.total_score >= before.total_score
            assert after.completed_levels >= before.completed_levels
            assert set(after.badges) >= set(before.badges)
            before = after

    def test_reset_progress(self, game: GameController):
        for level_id in (1, 2, 3):
            _pass(game, level_id)
        game.reset_progress()
        assert game.progress == GameProgress()
        assert game.is_level_unlocked(1)
        assert not game.is_level_unlocked(2)
        assert game.get_completion_count(1) == 0


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class TestSessions:
    def test_locked_level_cannot_start(self, game: GameController):
        assert game.start_level(3) is None
        assert game.active_session is None
        assert game.progress == GameProgress()

    def test_unknown_level_raises(self, game: GameController):
        with pytest.raises(KeyError):
            game.start_level(42)

    def test_abandon_records_nothing(self, game: GameController):
        session = game.start_level(1)
        session.begin_quiz()
        session.select(0)
        session.submit()
        game.abandon_level()
        assert game.active_session is None
        assert game.progress == GameProgress()
        assert game.finish_level(session) is None

    def test_finish_requires_outcome(self, game: GameController):
        session = game.start_level(1)
        session.begin_quiz()
        assert game.finish_level(session) is None
        assert session.phase is Phase.ANSWERING
        assert game.progress == GameProgress()

    def test_finish_only_once(self, game: GameController):
        game.complete_level(1, 0)
        session = game.start_level(2)
        session.begin_quiz()
        session.select(0)
        session.submit()
        session.advance()
        assert game.finish_level(session) is not None
        assert game.finish_level(session) is None
        assert game.progress.total_score == 20

    def test_new_session_replaces_old(self, game: GameController):
        first = game.start_level(1)
        second = game.start_level(1)
        assert game.active_session is second
        assert first is not second

    def test_unlock_all(self, catalog: CatalogRepository, storage):
        game = GameController(
            catalog=catalog,
            progress_store=ProgressStore(storage),
            completion_store=CompletionCounterStore(storage),
            unlock_all=True,
        )
        assert game.is_level_unlocked(5)
        assert game.is_section_unlocked(2)
        assert game.start_level(5) is not None
        assert game.progress == GameProgress()


class TestPersistenceAcrossRestart:
    def test_restart(self, catalog: CatalogRepository, tmp_path: Path):
        def build() -> GameController:
            storage = JsonFileStorage(tmp_path)
            return GameController(catalog, ProgressStore(storage), CompletionCounterStore(storage))

        _pass(build(), 1)
        game = build()
        assert game.is_level_unlocked(2)
        assert game.get_completion_count(1) == 1
        assert game.progress.total_score == 120
