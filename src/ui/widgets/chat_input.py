from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import QTextEdit

SUBMIT_KEYS = (Qt.Key.Key_Return, Qt.Key.Key_Enter)


class ChatInputTextEdit(QTextEdit):
    """
    Plain-text prompt editor. Enter submits, Shift+Enter starts a new line.
    Pasted content is always reduced to plain text.
    """
    submitted = Signal()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setAcceptRichText(False)
        self.setTabChangesFocus(True)

    def keyPressEvent(self, event: QKeyEvent):
        shift_held = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
        if event.key() in SUBMIT_KEYS and not shift_held:
            self.submitted.emit()
            event.accept()
            return
        super().keyPressEvent(event)

    def insertFromMimeData(self, source):
        if source.hasText():
            self.insertPlainText(source.text())
