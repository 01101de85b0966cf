"""Application entry point and setup for the NetLearn quiz game."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from netlearn.core.catalog import CatalogRepository
from netlearn.core.completions import CompletionCounterStore
from netlearn.core.config import Settings
from netlearn.core.feedback import QtFeedbackNotifier
from netlearn.core.game import GameController
from netlearn.core.progress import ProgressStore
from netlearn.core.storage import JsonFileStorage
from netlearn.ui.main_window import MainWindow


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_game(settings: Settings, notifier: QtFeedbackNotifier) -> GameController:
    """Load content and saved progress, and wire up the controller."""
    catalog = CatalogRepository(settings.catalog_path)
    storage = JsonFileStorage(settings.home)
    game = GameController(
        catalog=catalog,
        progress_store=ProgressStore(storage),
        completion_store=CompletionCounterStore(storage),
        notifier=notifier,
        unlock_all=settings.unlock_all,
    )
    logging.info(
        "Loaded %d levels in %d sections; progress stored in %s",
        catalog.total_levels,
        len(catalog.list_sections()),
        storage.directory,
    )
    return game


def run() -> None:
    """Initialize the application, load resources, and start the main window."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = QApplication(sys.argv)
    app.setApplicationName("NetLearn")
    app.setApplicationDisplayName("NetLearn")

    notifier = QtFeedbackNotifier()
    game = build_game(settings, notifier)

    window = MainWindow(game=game, notifier=notifier)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
