"""
ProjectController - Bridges the main window widgets and the ProjectStore.

Handles:
- Rendering store state (project list, header, transcript, preview, error banner)
- Forwarding user intents (new, select, delete, send, enhance)
- Running blocking store and completion calls on the Qt thread pool
"""
from __future__ import annotations

import logging
from html import escape
from typing import Optional

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import QInputDialog, QLabel, QLineEdit, QMessageBox, QWidget

from src.sitesmith.app.event_bus import EventBus
from src.sitesmith.models.event_types import (
    GENERATION_COMPLETED,
    GENERATION_FAILED,
    GENERATION_STARTED,
    PROJECTS_CHANGED,
)
from src.sitesmith.models.events import Event
from src.sitesmith.services.completion_service import CompletionService
from src.sitesmith.services.project_store import ProjectStore
from src.ui.qt_worker import Worker
from src.ui.widgets.chat_display_widget import ChatDisplayWidget
from src.ui.widgets.chat_input_widget import ChatInputWidget
from src.ui.widgets.preview_widget import PreviewWidget
from src.ui.widgets.project_list_widget import ProjectListWidget
from src.ui.widgets.thinking_indicator_widget import ThinkingIndicatorWidget
from src.ui.windows.main_window_constants import AUTH_ERROR_HINT
from src.ui.windows.main_window_signals import MainWindowSignaller

logger = logging.getLogger(__name__)

DISMISS_LINK = "#dismiss"
API_KEY_LINK = "#api-key"


class ProjectController:
    """
    Controller that keeps the views in sync with the ProjectStore.

    The views never hold state of their own; every refresh re-reads the store.
    """

    def __init__(
        self,
        *,
        store: ProjectStore,
        completion_service: CompletionService,
        event_bus: EventBus,
        parent: QWidget,
        project_list: ProjectListWidget,
        header: QLabel,
        chat_display: ChatDisplayWidget,
        chat_input: ChatInputWidget,
        thinking_indicator: ThinkingIndicatorWidget,
        error_banner: QLabel,
        preview: PreviewWidget,
    ) -> None:
        self.store = store
        self.completion_service = completion_service
        self.event_bus = event_bus
        self.parent = parent
        self.project_list = project_list
        self.header = header
        self.chat_display = chat_display
        self.chat_input = chat_input
        self.thinking_indicator = thinking_indicator
        self.error_banner = error_banner
        self.preview = preview

        self._signaller = MainWindowSignaller()
        self._enhancing = False

    def register(self) -> None:
        """Connect widget signals and event subscriptions, then render once."""
        self.project_list.new_project_requested.connect(self.store.create_project)
        self.project_list.project_selected.connect(self.store.select_project)
        self.project_list.delete_project_requested.connect(self._handle_delete_requested)
        self.chat_input.message_requested.connect(self._handle_message_requested)
        self.chat_input.enhance_requested.connect(self._handle_enhance_requested)
        self.error_banner.linkActivated.connect(self._on_banner_link)
        self._signaller.enhancement_ready.connect(self._on_enhancement_ready)
        self._signaller.enhancement_failed.connect(self._on_enhancement_failed)

        self.event_bus.subscribe(PROJECTS_CHANGED, self._on_projects_changed)
        self.event_bus.subscribe(GENERATION_STARTED, self._on_generation_started)
        self.event_bus.subscribe(GENERATION_COMPLETED, self._on_generation_finished)
        self.event_bus.subscribe(GENERATION_FAILED, self._on_generation_failed)

        self.refresh()

    # ------------------- Rendering -------------------
    def refresh(self) -> None:
        projects = self.store.list_projects()
        active = self.store.get_active_project()
        self.project_list.set_projects(projects, self.store.active_project_id)

        self.header.setText(active.name if active else "No Website Selected")
        self.chat_display.render_history(active.chat_history if active else [])
        self.preview.show_code(active.generated_code if active else None)
        self._render_error(self.store.last_error)

    def _render_error(self, message: Optional[str], offer_key_entry: bool = False) -> None:
        if not message:
            self.error_banner.clear()
            self.error_banner.hide()
            return

        links = [f"<a href='{DISMISS_LINK}'>Dismiss</a>"]
        if offer_key_entry:
            links.insert(0, f"<a href='{API_KEY_LINK}'>Set API key</a>")
        text = escape(message).replace("\n", "<br>")
        self.error_banner.setText(f"{text} &nbsp; {' &nbsp; '.join(links)}")
        self.error_banner.show()

    def _on_banner_link(self, link: str) -> None:
        if link == API_KEY_LINK:
            self._prompt_for_api_key()
            return
        self.store.clear_error()
        self._render_error(None)

    def _prompt_for_api_key(self) -> None:
        api_key, accepted = QInputDialog.getText(
            self.parent,
            "OpenRouter API key",
            "Paste your OpenRouter API key. It is saved to user_settings.json.",
            QLineEdit.EchoMode.Password,
        )
        if not accepted or not api_key.strip():
            return
        try:
            self.completion_service.update_api_key(api_key)
        except (ValueError, OSError) as exc:
            logger.error("Failed to store the API key: %s", exc, exc_info=True)
            self._render_error(f"Could not save the API key: {exc}")
            return
        self.store.clear_error()
        self._render_error(None)
        self.chat_input.focus_input()

    # ------------------- Store events -------------------
    def _on_projects_changed(self, event: Event) -> None:
        self.refresh()

    def _on_generation_started(self, event: Event) -> None:
        self.chat_input.clear_sent_text((event.payload or {}).get("prompt", ""))
        self.chat_input.setEnabled(False)
        self.thinking_indicator.start_thinking("Generating your website")

    def _on_generation_finished(self, event: Event) -> None:
        self._restore_chat_input()
        self.refresh()

    def _on_generation_failed(self, event: Event) -> None:
        payload = event.payload or {}
        self._restore_chat_input()
        self.refresh()
        if not self.chat_input.text() and payload.get("prompt"):
            self.chat_input.set_text(payload["prompt"])
        if payload.get("error_type") == "AuthError":
            self._render_error(f"{payload.get('error')}\n{AUTH_ERROR_HINT}", offer_key_entry=True)

    def _restore_chat_input(self) -> None:
        # Another request still owns the input.
        if self._enhancing or self.store.is_loading:
            return
        self.thinking_indicator.stop_thinking()
        self.chat_input.setEnabled(True)
        self.chat_input.focus_input()

    # ------------------- User intents -------------------
    def _handle_delete_requested(self, project_id: str) -> None:
        answer = QMessageBox.question(
            self.parent,
            "Delete website",
            "Delete this website and its conversation? This cannot be undone.",
        )
        if answer == QMessageBox.Yes:
            self.store.delete_project(project_id)

    def _handle_message_requested(self) -> None:
        if self.store.is_loading or self._enhancing:
            return
        prompt = self.chat_input.text()
        if not prompt:
            return
        # The input is cleared on GENERATION_STARTED, so a refused send keeps the text.
        QThreadPool.globalInstance().start(Worker(self.store.send_message, prompt))

    def _handle_enhance_requested(self) -> None:
        prompt = self.chat_input.text()
        if not prompt or self._enhancing or self.store.is_loading:
            return
        self._enhancing = True
        self.chat_input.setEnabled(False)
        self.thinking_indicator.start_thinking("Enhancing your prompt")
        QThreadPool.globalInstance().start(Worker(self._enhance_background, prompt))

    def _enhance_background(self, prompt: str) -> None:
        """Runs in background thread - safe to block."""
        try:
            enhanced = self.completion_service.enhance(prompt)
        except Exception as exc:
            logger.error("Prompt enhancement failed: %s", exc, exc_info=True)
            self._signaller.enhancement_failed.emit(str(exc) or "Prompt enhancement failed.")
            return
        self._signaller.enhancement_ready.emit(enhanced)

    def _on_enhancement_ready(self, enhanced: str) -> None:
        self._enhancing = False
        self._restore_chat_input()
        self.chat_input.set_text(enhanced)

    def _on_enhancement_failed(self, message: str) -> None:
        self._enhancing = False
        self._restore_chat_input()
        self._render_error(message)
