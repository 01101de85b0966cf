"""Fire-and-forget feedback events (sounds, flashes) raised at game transitions."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class FeedbackEvent(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    LEVEL_COMPLETE = "level-complete"
    CLICK = "click"
    UNLOCK = "unlock"


class FeedbackNotifier:
    """Receives feedback events."""

    def notify(self, event: FeedbackEvent) -> None:
        raise NotImplementedError


class NullNotifier(FeedbackNotifier):
    """Discards every event."""

    def notify(self, event: FeedbackEvent) -> None:
        pass


class QtFeedbackNotifier(QObject, FeedbackNotifier):
    """Re-emits feedback events as a Qt signal carrying the event value."""

    event_raised = Signal(str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        QObject.__init__(self, parent)

    def notify(self, event: FeedbackEvent) -> None:
        self.event_raised.emit(event.value)


def safe_notify(notifier: Optional[FeedbackNotifier], event: FeedbackEvent) -> None:
    """Deliver ``event``; a failing notifier never affects game state."""
    if notifier is None:
        return
    try:
        notifier.notify(event)
    except Exception as e:
        logger.warning("Feedback notifier failed on %s: %s", event.value, e)
