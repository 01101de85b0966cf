"""Main window: section map, level list and the level play-through screen."""

from __future__ import annotations

import html
import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QColor
from PySide6.QtWidgets import (
    QApplication,
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from netlearn.core.feedback import FeedbackEvent, QtFeedbackNotifier
from netlearn.core.game import GameController
from netlearn.core.session import LevelSession, Phase, pass_threshold
from netlearn.ui.colors import HomeColors, locked_color, section_color
from netlearn.ui.models import build_level_states, build_section_states

logger = logging.getLogger(__name__)

_FEEDBACK_TEXT = {
    FeedbackEvent.CORRECT.value: "Correct!",
    FeedbackEvent.WRONG.value: "Not quite.",
    FeedbackEvent.LEVEL_COMPLETE.value: "Level complete!",
    FeedbackEvent.UNLOCK.value: "Badge unlocked!",
}


class MainWindow(QMainWindow):
    def __init__(self, game: GameController, notifier: Optional[QtFeedbackNotifier] = None) -> None:
        super().__init__()
        self._game = game
        self._session: Optional[LevelSession] = None
        self._section_id: Optional[int] = None

        self.setWindowTitle("NetLearn")
        self.setMinimumSize(720, 560)
        if notifier is not None:
            notifier.event_raised.connect(self._on_feedback)

        self._build_ui()
        self._show_sections()

    # -- layout ----------------------------------------------------------

    def _build_ui(self) -> None:
        root = QWidget()
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(10)

        header = QHBoxLayout()
        self._header_label = QLabel("")
        self._header_label.setObjectName("headerLabel")
        reset_button = QPushButton("Reset progress")
        reset_button.clicked.connect(self._reset_progress)
        header.addWidget(self._header_label, 1)
        header.addWidget(reset_button, 0, Qt.AlignRight)
        root_layout.addLayout(header)

        self._stack = QStackedWidget()
        self._stack.addWidget(self._build_sections_page())
        self._stack.addWidget(self._build_levels_page())
        self._stack.addWidget(self._build_play_page())
        root_layout.addWidget(self._stack, 1)

        self.setCentralWidget(root)
        self.setStyleSheet(
            f"""
            QWidget {{ background: {HomeColors.BG}; color: {HomeColors.TEXT_PRIMARY}; font-size: 14px; }}
            QListWidget, QTextBrowser {{
                background: {HomeColors.CARD_BG};
                border: 1px solid {HomeColors.CARD_BORDER};
                border-radius: 8px;
            }}
            QPushButton {{
                background: {HomeColors.CARD_BG};
                border: 1px solid {HomeColors.CARD_BORDER};
                border-radius: 6px;
                padding: 8px 14px;
            }}
            QPushButton:checked {{ border-color: {section_color("cyan")}; }}
            QLabel#headerLabel {{ font-size: 16px; font-weight: 600; }}
            """
        )

    def _build_sections_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        title = QLabel("Choose a section")
        self._sections_list = QListWidget()
        self._sections_list.itemClicked.connect(self._on_section_activated)
        self._badges_label = QLabel("")
        self._badges_label.setWordWrap(True)
        layout.addWidget(title)
        layout.addWidget(self._sections_list, 1)
        layout.addWidget(self._badges_label)
        return page

    def _build_levels_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        back = QPushButton("Back to sections")
        back.clicked.connect(self._show_sections)
        self._section_title = QLabel("")
        self._levels_list = QListWidget()
        self._levels_list.itemClicked.connect(self._on_level_activated)
        layout.addWidget(back, 0, Qt.AlignLeft)
        layout.addWidget(self._section_title)
        layout.addWidget(self._levels_list, 1)
        return page

    def _build_play_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        top = QHBoxLayout()
        back = QPushButton("Leave level")
        back.clicked.connect(self._leave_level)
        self._play_status = QLabel("")
        top.addWidget(back, 0)
        top.addWidget(self._play_status, 1, Qt.AlignRight)
        layout.addLayout(top)

        self._material = QTextBrowser()
        self._material.setOpenExternalLinks(False)
        layout.addWidget(self._material, 1)

        self._question_label = QLabel("")
        self._question_label.setWordWrap(True)
        layout.addWidget(self._question_label)

        self._options_box = QVBoxLayout()
        layout.addLayout(self._options_box)
        self._options_group = QButtonGroup(self)
        self._options_group.setExclusive(True)
        self._options_group.idClicked.connect(self._on_option_clicked)

        self._explanation = QLabel("")
        self._explanation.setWordWrap(True)
        layout.addWidget(self._explanation)

        self._action_button = QPushButton("")
        self._action_button.clicked.connect(self._on_action)
        layout.addWidget(self._action_button, 0, Qt.AlignRight)
        return page

    # -- pages -----------------------------------------------------------

    def _refresh_header(self) -> None:
        progress = self._game.progress
        total_badges = len(self._game.all_badges())
        self._header_label.setText(
            f"Score {progress.total_score}   ·   "
            f"Levels {len(progress.completed_levels)}/{self._game.catalog.total_levels} "
            f"({self._game.get_progress_percentage()}%)   ·   "
            f"Badges {len(progress.badges)}/{total_badges}"
        )

    def _show_sections(self) -> None:
        self._section_id = None
        self._refresh_header()
        self._sections_list.clear()
        for state in build_section_states(self._game):
            section = state.section
            lock = "" if state.unlocked else "🔒 "
            badge = " ✔" if state.badge_earned else ""
            item = QListWidgetItem(
                f"{lock}{section.icon} {section.name} · {state.percent}% · {section.badge}{badge}"
            )
            item.setData(Qt.UserRole, section.id)
            accent = section_color(section.color)
            item.setForeground(QColor(accent if state.unlocked else locked_color(accent)))
            self._sections_list.addItem(item)
        earned = ", ".join(self._game.progress.badges) or "none yet"
        self._badges_label.setText(f"Badges: {earned}")
        self._stack.setCurrentIndex(0)

    def _show_levels(self, section_id: int) -> None:
        self._section_id = section_id
        section = self._game.catalog.get_section(section_id)
        self._refresh_header()
        self._section_title.setText(
            f"{section.icon} {section.name} · {self._game.get_section_progress(section_id)}% complete"
        )
        self._levels_list.clear()
        accent = section_color(section.color)
        for state in build_level_states(self._game, section_id):
            level = state.level
            marker = "✔" if state.completed else ("▶" if state.is_current else ("" if state.unlocked else "🔒"))
            plural = "completion" if state.completions == 1 else "completions"
            item = QListWidgetItem(f"#{level.id:02d} {level.title}  {marker}  ({state.completions} {plural})")
            item.setData(Qt.UserRole, level.id)
            item.setForeground(QColor(accent if state.unlocked else locked_color(accent)))
            self._levels_list.addItem(item)
        self._stack.setCurrentIndex(1)

    def _on_section_activated(self, item: QListWidgetItem) -> None:
        section_id = int(item.data(Qt.UserRole))
        if not self._game.is_section_unlocked(section_id):
            self.statusBar().showMessage("Finish the previous section to unlock this one.", 3000)
            return
        self._show_levels(section_id)

    def _on_level_activated(self, item: QListWidgetItem) -> None:
        level_id = int(item.data(Qt.UserRole))
        session = self._game.start_level(level_id)
        if session is None:
            self.statusBar().showMessage("Complete the previous level first.", 3000)
            return
        self._session = session
        self._render_session()
        self._stack.setCurrentIndex(2)

    # -- play-through ----------------------------------------------------

    def _render_session(self) -> None:
        session = self._session
        if session is None:
            return
        level = session.level
        count = self._game.get_completion_count(level.id)
        plural = "completion" if count == 1 else "completions"
        self._play_status.setText(f"Level {level.id}/{self._game.catalog.total_levels} · {count} {plural}")
        self._clear_options()

        if session.phase is Phase.LEARNING:
            self._material.setVisible(True)
            self._material.setHtml(_learning_html(session))
            self._question_label.setText("")
            self._explanation.setText("")
            self._action_button.setText(f"Start quiz ({session.total_questions} questions)")
            self._action_button.setEnabled(True)
            return

        self._material.setVisible(False)
        question = session.current_question()
        self._question_label.setText(
            f"Question {session.index + 1}/{session.total_questions} · "
            f"{session.correct_count} correct\n\n{question.prompt}"
        )
        for i, option in enumerate(question.options):
            button = QPushButton(option)
            button.setCheckable(True)
            button.setChecked(session.selected == i)
            button.setEnabled(not session.is_answered)
            if session.is_answered:
                if i == question.correct_answer:
                    button.setStyleSheet(f"border-color: {HomeColors.CORRECT};")
                elif i == session.selected:
                    button.setStyleSheet(f"border-color: {HomeColors.WRONG};")
            self._options_group.addButton(button, i)
            self._options_box.addWidget(button)

        if session.is_answered:
            verdict = "Correct!" if session.last_answer_correct else "Incorrect."
            extra = f" {question.explanation}" if question.explanation else ""
            self._explanation.setText(verdict + extra)
            self._action_button.setText("See results" if session.is_last_question else "Next question")
            self._action_button.setEnabled(True)
        else:
            self._explanation.setText("")
            self._action_button.setText("Submit answer")
            self._action_button.setEnabled(session.selected is not None)

    def _clear_options(self) -> None:
        for button in self._options_group.buttons():
            self._options_group.removeButton(button)
            self._options_box.removeWidget(button)
            button.deleteLater()

    def _on_option_clicked(self, option: int) -> None:
        if self._session is not None and self._session.select(option):
            self._render_session()

    def _on_action(self) -> None:
        session = self._session
        if session is None:
            return
        if session.phase is Phase.LEARNING:
            session.begin_quiz()
        elif session.phase is Phase.ANSWERING:
            session.submit()
        elif session.phase is Phase.GRADED:
            outcome = session.advance()
            if outcome is not None:
                self._finish_session(session)
                return
        self._render_session()

    def _finish_session(self, session: LevelSession) -> None:
        outcome = self._game.finish_level(session)
        self._session = None
        if outcome is not None:
            if outcome.passed:
                title = "Level complete!"
                text = f"You've mastered \"{session.level.title}\"."
            else:
                title = "Level finished"
                text = f"You needed {pass_threshold(outcome.total_questions)} correct answers to pass."
            QMessageBox.information(
                self,
                title,
                f"{text}\n\n{outcome.correct_count}/{outcome.total_questions} questions correct\n"
                f"+{outcome.score_delta} points",
            )
        if self._section_id is not None:
            self._show_levels(self._section_id)
        else:
            self._show_sections()

    def _leave_level(self) -> None:
        self._game.abandon_level()
        self._session = None
        if self._section_id is not None:
            self._show_levels(self._section_id)
        else:
            self._show_sections()

    # -- misc ------------------------------------------------------------

    def _on_feedback(self, event: str) -> None:
        logger.debug("Feedback: %s", event)
        text = _FEEDBACK_TEXT.get(event)
        if text:
            self.statusBar().showMessage(text, 2000)
        if event == FeedbackEvent.WRONG.value:
            QApplication.beep()

    def _reset_progress(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset progress",
            "This clears every completed level, your score and your badges. Continue?",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._session = None
        self._game.reset_progress()
        self._show_sections()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Leaving mid-level records nothing."""
        self._game.abandon_level()
        super().closeEvent(event)


def _learning_html(session: LevelSession) -> str:
    level = session.level
    parts = [f"<h2>{html.escape(level.title)}</h2>", "<h3>What you'll learn</h3>"]
    for block in level.content:
        parts.append(f"<h4>{html.escape(block.heading)}</h4><p>{html.escape(block.text)}</p>")
        if block.example:
            parts.append(f"<p><i>{html.escape(block.example)}</i></p>")
    if level.key_takeaways:
        parts.append("<h3>Key takeaways</h3><ul>")
        parts.extend(f"<li>{html.escape(t)}</li>" for t in level.key_takeaways)
        parts.append("</ul>")
    return "".join(parts)
