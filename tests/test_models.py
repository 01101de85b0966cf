"""Tests for netlearn.ui.models – section/level view state."""

from __future__ import annotations

from netlearn.core.game import GameController
from netlearn.ui.models import LevelState, SectionState, build_level_states, build_section_states


# ===========================================================================
# Dataclass defaults
# ===========================================================================

class TestDataclasses:
    def test_level_state_defaults(self, game: GameController):
        ls = LevelState(level=game.catalog.get_level(1), unlocked=True, completed=False)
        assert ls.completions == 0
        assert ls.is_current is False

    def test_section_state_defaults(self, game: GameController):
        ss = SectionState(section=game.catalog.get_section(1), unlocked=True, percent=0)
        assert ss.badge_earned is False


# ===========================================================================
# build_section_states
# ===========================================================================

class TestBuildSectionStates:
    def test_fresh(self, game: GameController):
        states = build_section_states(game)
        assert [s.section.id for s in states] == [1, 2]
        assert [s.unlocked for s in states] == [True, False]
        assert [s.percent for s in states] == [0, 0]

    def test_after_first_section(self, game: GameController):
        for level_id in (1, 2, 3):
            game.complete_level(level_id, 10)
        first, second = build_section_states(game)
        assert first.percent == 100
        assert first.badge_earned
        assert second.unlocked
        assert not second.badge_earned


# ===========================================================================
# build_level_states
# ===========================================================================

class TestBuildLevelStates:
    def test_fresh(self, game: GameController):
        states = build_level_states(game, 1)
        assert [s.unlocked for s in states] == [True, False, False]
        assert [s.is_current for s in states] == [True, False, False]

    def test_current_moves_forward(self, game: GameController):
        game.complete_level(1, 10)
        game.increment_completion(1)
        states = build_level_states(game, 1)
        assert states[0].completed
        assert states[0].completions == 1
        assert [s.is_current for s in states] == [False, True, False]

    def test_no_current_when_section_done(self, game: GameController):
        for level_id in (1, 2, 3):
            game.complete_level(level_id, 10)
        assert not any(s.is_current for s in build_level_states(game, 1))
