from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QUrl
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QLabel, QStackedWidget, QWidget

# Remote scripts (the Tailwind CDN) only load when the document has a non-local origin.
PREVIEW_BASE_URL = QUrl("https://preview.sitesmith.local/")


class PreviewWidget(QStackedWidget):
    """
    Live preview of the generated document, or a placeholder when there is none.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._placeholder = QLabel("Your generated website will be previewed here.", self)
        self._placeholder.setAlignment(Qt.AlignCenter)
        self._placeholder.setObjectName("preview_placeholder")
        self._view = QWebEngineView(self)
        self._current_code: Optional[str] = None

        self.addWidget(self._placeholder)
        self.addWidget(self._view)
        self.setCurrentWidget(self._placeholder)

    def show_code(self, code: Optional[str]) -> None:
        if not code:
            self._current_code = None
            self.setCurrentWidget(self._placeholder)
            return
        if code != self._current_code:
            self._current_code = code
            self._view.setHtml(code, PREVIEW_BASE_URL)
        self.setCurrentWidget(self._view)
