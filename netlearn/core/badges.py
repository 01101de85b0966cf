from __future__ import annotations

from typing import AbstractSet, Iterable, List

from netlearn.core.catalog import Section
from netlearn.core.config import GRAND_BADGE


def derive_badges(completed_levels: AbstractSet[int], sections: Iterable[Section]) -> List[str]:
    """Badges that ``completed_levels`` qualifies for, in section order.

    A section badge needs every level of that section; the grand badge needs
    every level of every section.
    """
    earned: List[str] = []
    everything = True
    any_section = False
    for section in sections:
        any_section = True
        if all(level_id in completed_levels for level_id in section.level_ids):
            if section.badge not in earned:
                earned.append(section.badge)
        else:
            everything = False
    if any_section and everything:
        earned.append(GRAND_BADGE)
    return earned


def all_badges(sections: Iterable[Section]) -> List[str]:
    """The full roster of obtainable badges."""
    names: List[str] = []
    for section in sections:
        if section.badge not in names:
            names.append(section.badge)
    names.append(GRAND_BADGE)
    return names
