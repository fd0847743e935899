from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QHBoxLayout, QPushButton, QSizePolicy, QVBoxLayout, QWidget

from src.ui.widgets.chat_input import ChatInputTextEdit


class ChatInputWidget(QWidget):
    """
    Wrapper around the chat input text edit that exposes a clean message API.
    """

    message_requested = Signal()
    enhance_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self._text_edit = ChatInputTextEdit()
        self._text_edit.setObjectName("chat_input")
        self._text_edit.setPlaceholderText("Describe your website. Shift+Enter for newline. Enter to send.")
        self._text_edit.submitted.connect(self.message_requested.emit)
        self._text_edit.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        self._send_button = QPushButton("Send", self)
        self._send_button.setObjectName("send_button")
        self._send_button.setToolTip("Send (Enter). Shift+Enter for newline")
        self._send_button.clicked.connect(self.message_requested.emit)

        self._enhance_button = QPushButton("Enhance", self)
        self._enhance_button.setObjectName("enhance_button")
        self._enhance_button.setToolTip("Expand the prompt into a detailed website brief")
        self._enhance_button.clicked.connect(self.enhance_requested.emit)

        buttons = QVBoxLayout()
        buttons.setSpacing(4)
        buttons.addWidget(self._send_button)
        buttons.addWidget(self._enhance_button)

        layout.addWidget(self._text_edit, 5)
        layout.addLayout(buttons)

    def text(self) -> str:
        return self._text_edit.toPlainText().strip()

    def set_text(self, text: str) -> None:
        self._text_edit.setPlainText(text)

    def clear_sent_text(self, sent_text: str) -> None:
        """
        Clear the input once its message has been accepted, unless it was
        replaced in the meantime.
        """
        if self.text() == (sent_text or "").strip():
            self._text_edit.clear()

    def focus_input(self) -> None:
        self._text_edit.setFocus()

    def setEnabled(self, enabled: bool) -> None:  # noqa: D401 - QWidget signature
        super().setEnabled(enabled)
        self._text_edit.setEnabled(enabled)
