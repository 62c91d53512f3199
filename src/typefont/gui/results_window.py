# -*- coding: utf-8 -*-
"""
src/typefont/gui/results_window.py

Defines the ResultsWindow widget for displaying a font ranking.

A small, frameless PyQt6 window centered on the primary screen. It shows the
best match prominently, followed by the runners-up, and closes on click or
after a timeout.
"""

import sys
from typing import List, Sequence

from PyQt6.QtWidgets import QWidget, QLabel, QVBoxLayout, QApplication, QFrame
from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QCloseEvent, QFont, QMouseEvent

from ..models import FontScore

# Configuration for the results window
WINDOW_TIMEOUT_MS = 8000
MAX_RUNNERS_UP = 4


def describe(score: FontScore) -> str:
    """One-line label for a ranked font."""
    name = score.meta.get("name") or score.name
    if score.is_degenerate:
        return f"{name} (no shared characters)"
    return f"{name} ({score.similarity:.1%}, {score.compared} chars)"


class ResultsWindow(QWidget):
    """
    A temporary, frameless window listing the best font matches.
    """

    closed = pyqtSignal()

    def __init__(self, scores: Sequence[FontScore], copied: bool = False, parent: QWidget = None):
        """
        Initializes the results window.

        Args:
            scores (Sequence[FontScore]): Ranked scores, best match first.
            copied (bool): Whether the best match was copied to the clipboard.
            parent (QWidget, optional): The parent widget. Defaults to None.
        """
        super().__init__(parent)

        if not scores:
            return

        self.scores: List[FontScore] = list(scores)
        self.copied = copied

        self._setup_window_properties()
        self._setup_ui()
        self._position_window()

        self.close_timer = QTimer(self)
        self.close_timer.setSingleShot(True)
        self.close_timer.timeout.connect(self.close)
        self.close_timer.start(WINDOW_TIMEOUT_MS)

    def _setup_window_properties(self):
        """Sets the window flags and styling."""
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.ToolTip
        )
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.setStyleSheet("""
            QWidget {
                background-color: #2E2E2E;
                color: #E0E0E0;
                border: 1px solid #555555;
                border-radius: 5px;
                font-family: sans-serif;
            }
        """)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 12)
        layout.setSpacing(5)

        top_match_label = QLabel(describe(self.scores[0]))
        top_match_font = QFont()
        top_match_font.setBold(True)
        top_match_font.setPointSize(11)
        top_match_label.setFont(top_match_font)
        top_match_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(top_match_label)

        if self.copied:
            clipboard_label = QLabel("(Copied to clipboard)")
            clipboard_font = QFont()
            clipboard_font.setPointSize(8)
            clipboard_font.setItalic(True)
            clipboard_label.setFont(clipboard_font)
            clipboard_label.setStyleSheet("color: #AAAAAA; padding-bottom: 4px;")
            layout.addWidget(clipboard_label)

        separator = QFrame()
        separator.setFrameShape(QFrame.Shape.HLine)
        separator.setFrameShadow(QFrame.Shadow.Sunken)
        separator.setStyleSheet("background-color: #555;")
        layout.addWidget(separator)

        for i, score in enumerate(self.scores[1:1 + MAX_RUNNERS_UP], start=2):
            match_label = QLabel(f"{i}. {describe(score)}")
            match_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            layout.addWidget(match_label)

        self.setLayout(layout)

    def _position_window(self):
        """Centers the window on the available area of the primary screen."""
        screen_geometry = QApplication.primaryScreen().availableGeometry()
        self.adjustSize()
        window_size = self.size()

        pos_x = screen_geometry.left() + (screen_geometry.width() - window_size.width()) // 2
        pos_y = screen_geometry.top() + (screen_geometry.height() - window_size.height()) // 2
        self.move(max(pos_x, screen_geometry.left()), max(pos_y, screen_geometry.top()))

    def mousePressEvent(self, event: QMouseEvent):
        """Closes the window when the user clicks anywhere on it."""
        self.close()
        event.accept()

    def closeEvent(self, event: QCloseEvent):
        self.closed.emit()
        super().closeEvent(event)


def show_results(scores: Sequence[FontScore], copied: bool = False) -> int:
    """
    Shows the ranking and blocks until the window closes.

    Returns:
        int: The Qt event loop's exit code.
    """
    if not scores:
        return 0
    app = QApplication.instance() or QApplication(sys.argv)
    window = ResultsWindow(scores, copied=copied)
    # Tool tip windows do not count towards quitOnLastWindowClosed.
    window.closed.connect(app.quit)
    window.show()
    return app.exec()
