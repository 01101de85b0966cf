"""Shared fixtures: a small two-section catalog and in-memory stores."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest
import yaml

from netlearn.core.catalog import CatalogRepository
from netlearn.core.completions import CompletionCounterStore
from netlearn.core.feedback import FeedbackEvent, FeedbackNotifier
from netlearn.core.game import GameController
from netlearn.core.progress import ProgressStore
from netlearn.core.storage import MemoryStorage


def make_question(qid: str, answer: int = 0, n_options: int = 4) -> Dict[str, Any]:
    return {
        "id": qid,
        "question": f"Question {qid}?",
        "options": [f"option {i}" for i in range(n_options)],
        "answer": answer,
        "explanation": f"Because {qid}.",
    }


def small_catalog_data() -> Dict[str, Any]:
    """Section 1 = levels 1-3, section 2 = levels 4-5. Every answer is option 0."""
    return {
        "sections": [
            {"id": 1, "name": "Basics", "icon": "B", "color": "cyan", "levels": [1, 2, 3], "badge": "Basics Badge"},
            {"id": 2, "name": "Advanced", "icon": "A", "color": "green", "levels": {"first": 4, "last": 5}, "badge": "Advanced Badge"},
        ],
        "levels": [
            {
                "id": 1,
                "title": "Six Questions",
                "section": 1,
                "content": [{"heading": "Intro", "text": "Read me.", "example": "For example."}],
                "key_takeaways": ["One", "Two"],
                "questions": [make_question(f"1-{i}") for i in range(1, 7)],
            },
            {"id": 2, "title": "One Question", "section": 1, "questions": [make_question("2-1")]},
            {"id": 3, "title": "Five Questions", "section": 1, "questions": [make_question(f"3-{i}") for i in range(1, 6)]},
            {"id": 4, "title": "Templated", "section": 2},
            {"id": 5, "title": "Also Templated", "section": 2},
        ],
        "defaults": {
            "content": [{"heading": "About {title}", "text": "Level {id} text."}],
            "key_takeaways": ["{title} matters"],
            "questions": [
                {"id": "{id}-1", "question": "Is {title_lower} useful?", "options": ["Yes", "No"], "answer": 0, "type": "true-false"},
                {"id": "{id}-2", "question": "Pick A", "options": ["A", "B"], "answer": 0},
            ],
        },
    }


def write_catalog(path: Path, data: Dict[str, Any]) -> Path:
    path.write_text(yaml.safe_dump(data, allow_unicode=True, sort_keys=False), encoding="utf-8")
    return path


class RecordingNotifier(FeedbackNotifier):
    def __init__(self) -> None:
        self.events: List[FeedbackEvent] = []

    def notify(self, event: FeedbackEvent) -> None:
        self.events.append(event)


@pytest.fixture()
def catalog_path(tmp_path: Path) -> Path:
    return write_catalog(tmp_path / "catalog.yaml", small_catalog_data())


@pytest.fixture()
def catalog(catalog_path: Path) -> CatalogRepository:
    return CatalogRepository(catalog_path)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def game(catalog: CatalogRepository, storage: MemoryStorage, notifier: RecordingNotifier) -> GameController:
    return GameController(
        catalog=catalog,
        progress_store=ProgressStore(storage),
        completion_store=CompletionCounterStore(storage),
        notifier=notifier,
    )
