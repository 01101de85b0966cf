"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass

from netlearn.core.catalog import Level, Section
from netlearn.core.game import GameController


@dataclass
class SectionState:
    """UI state for a section card: unlock status and completion percentage."""

    section: Section
    unlocked: bool
    percent: int
    badge_earned: bool = False


@dataclass
class LevelState:
    """UI state for a single level: unlock status, completion and pass count."""

    level: Level
    unlocked: bool
    completed: bool
    completions: int = 0
    is_current: bool = False


def build_section_states(game: GameController) -> list[SectionState]:
    badges = set(game.progress.badges)
    return [
        SectionState(
            section=section,
            unlocked=game.is_section_unlocked(section.id),
            percent=game.get_section_progress(section.id),
            badge_earned=section.badge in badges,
        )
        for section in game.catalog.list_sections()
    ]


def build_level_states(game: GameController, section_id: int) -> list[LevelState]:
    """Compute unlock/completion state for a section's levels and mark the next target."""
    states = [
        LevelState(
            level=level,
            unlocked=game.is_level_unlocked(level.id),
            completed=game.is_level_completed(level.id),
            completions=game.get_completion_count(level.id),
        )
        for level in game.catalog.levels_in(section_id)
    ]
    for st in states:
        if st.unlocked and not st.completed:
            st.is_current = True
            break
    return states
