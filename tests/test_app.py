"""Tests for netlearn.app – wiring of settings, stores and controller."""

from __future__ import annotations

from pathlib import Path

from netlearn.app import build_game
from netlearn.core.config import Settings
from netlearn.core.feedback import QtFeedbackNotifier


class TestBuildGame:
    def test_uses_settings(self, tmp_path: Path, catalog_path: Path):
        settings = Settings(home=tmp_path / "home", catalog_path=catalog_path, unlock_all=True)
        game = build_game(settings, QtFeedbackNotifier())
        assert game.catalog.total_levels == 5
        assert game.is_level_unlocked(5)
        assert (tmp_path / "home").is_dir()

    def test_progress_written_under_home(self, tmp_path: Path, catalog_path: Path):
        settings = Settings(home=tmp_path / "home", catalog_path=catalog_path)
        game = build_game(settings, QtFeedbackNotifier())
        game.complete_level(1, 40)
        assert (tmp_path / "home" / "networklearn_progress.json").exists()
