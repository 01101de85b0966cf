"""Tests for netlearn.core.config – environment settings."""

from __future__ import annotations

import logging
from pathlib import Path

from netlearn.core.config import DEFAULT_CATALOG, DEFAULT_HOME, Settings


class TestSettingsFromEnv:
    def test_defaults(self):
        s = Settings.from_env({})
        assert s.home == DEFAULT_HOME
        assert s.catalog_path == DEFAULT_CATALOG
        assert s.unlock_all is False
        assert s.log_level == logging.INFO

    def test_overrides(self, tmp_path: Path):
        s = Settings.from_env(
            {
                "NETLEARN_HOME": str(tmp_path),
                "NETLEARN_CATALOG": str(tmp_path / "c.yaml"),
                "NETLEARN_UNLOCK_ALL": "1",
                "NETLEARN_LOG_LEVEL": "debug",
            }
        )
        assert s.home == tmp_path
        assert s.catalog_path == tmp_path / "c.yaml"
        assert s.unlock_all is True
        assert s.log_level == logging.DEBUG

    def test_unlock_all_needs_exactly_one(self):
        assert Settings.from_env({"NETLEARN_UNLOCK_ALL": "yes"}).unlock_all is False

    def test_unknown_log_level(self):
        assert Settings.from_env({"NETLEARN_LOG_LEVEL": "chatty"}).log_level == logging.INFO

    def test_default_catalog_is_bundled(self):
        assert DEFAULT_CATALOG.name == "catalog.yaml"
        assert DEFAULT_CATALOG.exists()
