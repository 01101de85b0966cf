from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from netlearn.core.catalog import Level, Question
from netlearn.core.config import POINTS_PER_CORRECT_FAILED, POINTS_PER_CORRECT_PASSED
from netlearn.core.feedback import FeedbackEvent, FeedbackNotifier, safe_notify

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    LEARNING = "learning"
    ANSWERING = "answering"
    GRADED = "graded"
    OUTCOME = "outcome"


@dataclass(frozen=True)
class AnswerResult:
    """Grading of one submitted answer."""

    question: Question
    selected: int
    correct: bool


@dataclass(frozen=True)
class LevelOutcome:
    """What a finished play-through hands over to the stores."""

    level_id: int
    correct_count: int
    total_questions: int
    passed: bool
    score_delta: int


def pass_threshold(total_questions: int) -> int:
    """Correct answers needed to pass: a majority, rounding up."""
    return math.ceil(total_questions / 2)


def score_for(correct_count: int, passed: bool) -> int:
    per_answer = POINTS_PER_CORRECT_PASSED if passed else POINTS_PER_CORRECT_FAILED
    return correct_count * per_answer


class LevelSession:
    """One play-through of a level.

    The learner reads the material (``LEARNING``), then for every question
    selects an option and submits it (``ANSWERING`` -> ``GRADED``) and
    continues to the next. Continuing past the last question produces the
    ``LevelOutcome``. Actions that do not fit the current phase are ignored.
    Nothing here is persisted; abandoning the session records nothing.
    """

    def __init__(self, level: Level, notifier: Optional[FeedbackNotifier] = None) -> None:
        self._level = level
        self._notifier = notifier
        self._phase = Phase.LEARNING
        self._index = 0
        self._selected: Optional[int] = None
        self._last_correct = False
        self._correct_count = 0
        self._outcome: Optional[LevelOutcome] = None

    @property
    def level(self) -> Level:
        return self._level

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def index(self) -> int:
        """Index of the active question (0-based)."""
        return self._index

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    @property
    def is_answered(self) -> bool:
        return self._phase is Phase.GRADED

    @property
    def correct_count(self) -> int:
        return self._correct_count

    @property
    def total_questions(self) -> int:
        return len(self._level.questions)

    @property
    def is_last_question(self) -> bool:
        return self._index == self.total_questions - 1

    @property
    def last_answer_correct(self) -> bool:
        """Whether the graded answer is correct; False before grading."""
        return self._phase is Phase.GRADED and self._last_correct

    @property
    def outcome(self) -> Optional[LevelOutcome]:
        return self._outcome

    def current_question(self) -> Question:
        return self._level.questions[self._index]

    def begin_quiz(self) -> bool:
        if self._phase is not Phase.LEARNING:
            return False
        self._phase = Phase.ANSWERING
        self._index = 0
        safe_notify(self._notifier, FeedbackEvent.CLICK)
        logger.debug("Level %s: quiz started", self._level.id)
        return True

    def select(self, option: int) -> bool:
        if self._phase is not Phase.ANSWERING:
            return False
        options = self.current_question().options
        if not 0 <= option < len(options):
            raise IndexError(f"option {option} out of range for {len(options)} options")
        self._selected = option
        safe_notify(self._notifier, FeedbackEvent.CLICK)
        return True

    def submit(self) -> Optional[AnswerResult]:
        """Grade the selected option. Returns None when nothing can be graded."""
        if self._phase is not Phase.ANSWERING or self._selected is None:
            return None
        question = self.current_question()
        correct = question.is_correct(self._selected)
        self._last_correct = correct
        self._phase = Phase.GRADED
        if correct:
            self._correct_count += 1
            safe_notify(self._notifier, FeedbackEvent.CORRECT)
        else:
            safe_notify(self._notifier, FeedbackEvent.WRONG)
        logger.debug("Level %s question %s: correct=%s", self._level.id, question.id, correct)
        return AnswerResult(question=question, selected=self._selected, correct=correct)

    def advance(self) -> Optional[LevelOutcome]:
        """Continue after a graded question.

        Returns the outcome once the last question has been continued past,
        otherwise None.
        """
        if self._phase is not Phase.GRADED:
            return None
        if self.is_last_question:
            return self._finish()
        self._index += 1
        self._selected = None
        self._last_correct = False
        self._phase = Phase.ANSWERING
        safe_notify(self._notifier, FeedbackEvent.CLICK)
        return None

    def _finish(self) -> LevelOutcome:
        total = self.total_questions
        passed = self._correct_count >= pass_threshold(total)
        self._outcome = LevelOutcome(
            level_id=self._level.id,
            correct_count=self._correct_count,
            total_questions=total,
            passed=passed,
            score_delta=score_for(self._correct_count, passed),
        )
        self._phase = Phase.OUTCOME
        if passed:
            safe_notify(self._notifier, FeedbackEvent.LEVEL_COMPLETE)
        logger.debug("Level %s finished: %s", self._level.id, self._outcome)
        return self._outcome
