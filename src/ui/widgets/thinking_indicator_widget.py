from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QLabel, QWidget


class ThinkingIndicatorWidget(QLabel):
    """
    Single-line status label with animated dots while a request is pending.
    """

    _FRAMES = ("", ".", "..", "...")

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("thinking_indicator")
        self._message = ""
        self._frame = 0
        self._timer = QTimer(self)
        self._timer.setInterval(400)
        self._timer.timeout.connect(self._advance)
        self.hide()

    @property
    def is_animating(self) -> bool:
        return self._timer.isActive()

    def start_thinking(self, message: str) -> None:
        self._message = message
        self._frame = 0
        self.setText(message)
        self.show()
        self._timer.start()

    def stop_thinking(self) -> None:
        self._timer.stop()
        self.clear()
        self.hide()

    def _advance(self) -> None:
        self._frame = (self._frame + 1) % len(self._FRAMES)
        self.setText(f"{self._message}{self._FRAMES[self._frame]}")
