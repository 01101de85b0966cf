"""Unlock rules and completion percentages. Pure functions over a progress
snapshot and the catalog."""

from __future__ import annotations

from typing import Iterable

from netlearn.core.catalog import CatalogRepository
from netlearn.core.progress import GameProgress


def is_level_unlocked(level_id: int, progress: GameProgress) -> bool:
    """Level 1 is always open; level n opens once level n-1 is completed."""
    if level_id == 1:
        return True
    return (level_id - 1) in progress.completed_levels


def is_section_unlocked(section_id: int, progress: GameProgress, catalog: CatalogRepository) -> bool:
    """Section 1 is always open; section s opens once every level of s-1 is completed."""
    if section_id == 1:
        return True
    try:
        previous = catalog.get_section(section_id - 1)
    except KeyError:
        return False
    return all(level_id in progress.completed_levels for level_id in previous.level_ids)


def progress_percentage(progress: GameProgress, catalog: CatalogRepository) -> int:
    total = catalog.total_levels
    if not total:
        return 0
    known = sum(1 for level_id in progress.completed_levels if 1 <= level_id <= total)
    return round(known / total * 100)


def section_progress(level_ids: Iterable[int], progress: GameProgress) -> int:
    ids = list(level_ids)
    if not ids:
        return 0
    completed = sum(1 for level_id in ids if level_id in progress.completed_levels)
    return round(completed / len(ids) * 100)
