from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QSplitter, QVBoxLayout, QWidget

from src.sitesmith.app.event_bus import EventBus
from src.sitesmith.services.completion_service import CompletionService
from src.sitesmith.services.project_store import ProjectStore
from src.ui.controllers.project_controller import ProjectController
from src.ui.widgets.chat_display_widget import ChatDisplayWidget
from src.ui.widgets.chat_input_widget import ChatInputWidget
from src.ui.widgets.preview_widget import PreviewWidget
from src.ui.widgets.project_list_widget import ProjectListWidget
from src.ui.widgets.thinking_indicator_widget import ThinkingIndicatorWidget
from src.ui.windows.main_window_constants import SITESMITH_STYLESHEET, WINDOW_TITLE

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Sitesmith main window: project sidebar, chat column and live preview.
    """

    def __init__(
        self,
        event_bus: EventBus,
        *,
        store: ProjectStore,
        completion_service: CompletionService,
    ) -> None:
        super().__init__()
        self.event_bus = event_bus

        self.setWindowTitle(WINDOW_TITLE)
        self.setGeometry(100, 100, 1400, 850)
        self.setMinimumSize(900, 600)
        self.setStyleSheet(SITESMITH_STYLESHEET)

        self.project_list = ProjectListWidget(parent=self)
        self.header = QLabel(parent=self)
        self.header.setObjectName("project_header")
        self.chat_display = ChatDisplayWidget(parent=self)
        self.error_banner = QLabel(parent=self)
        self.error_banner.setObjectName("error_banner")
        self.error_banner.setWordWrap(True)
        self.error_banner.setTextFormat(Qt.RichText)
        self.error_banner.hide()
        self.thinking_indicator = ThinkingIndicatorWidget(parent=self)
        self.chat_input = ChatInputWidget(parent=self)
        self.preview = PreviewWidget(parent=self)

        self._build_layout()

        self._controller = ProjectController(
            store=store,
            completion_service=completion_service,
            event_bus=self.event_bus,
            parent=self,
            project_list=self.project_list,
            header=self.header,
            chat_display=self.chat_display,
            chat_input=self.chat_input,
            thinking_indicator=self.thinking_indicator,
            error_banner=self.error_banner,
            preview=self.preview,
        )
        self._controller.register()

    def _build_layout(self) -> None:
        chat_column = QWidget()
        chat_layout = QVBoxLayout(chat_column)
        chat_layout.setContentsMargins(10, 10, 10, 10)
        chat_layout.setSpacing(8)
        chat_layout.addWidget(self.header)
        chat_layout.addWidget(self.chat_display, 1)
        chat_layout.addWidget(self.error_banner)
        chat_layout.addWidget(self.thinking_indicator)
        chat_layout.addWidget(self.chat_input)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(self.project_list)
        self.splitter.addWidget(chat_column)
        self.splitter.addWidget(self.preview)
        self.splitter.setChildrenCollapsible(True)
        self.splitter.setStretchFactor(0, 0)  # Sidebar has fixed width
        self.splitter.setStretchFactor(1, 2)
        self.splitter.setStretchFactor(2, 3)  # Preview takes the most space
        self.splitter.setSizes([220, 520, 660])

        self.setCentralWidget(self.splitter)

    def closeEvent(self, event) -> None:  # noqa: D401 - QWidget signature
        QApplication.quit()
        super().closeEvent(event)
