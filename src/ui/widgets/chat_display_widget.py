from __future__ import annotations

from html import escape
from typing import Optional, Sequence

from PySide6.QtWidgets import QTextBrowser, QWidget

from src.sitesmith.models.project import Message

EMPTY_TRANSCRIPT_HTML = (
    "<p style='color:#6b7280;'>Describe the website you want to build. "
    "Each new message refines the current version.</p>"
)


class ChatDisplayWidget(QTextBrowser):
    """
    Read-only transcript of the active project's conversation.

    Assistant turns hold whole HTML documents, so they are summarized rather
    than printed.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("chat_display")
        self.setOpenExternalLinks(False)

    def render_history(self, messages: Sequence[Message]) -> None:
        if not messages:
            self.setHtml(EMPTY_TRANSCRIPT_HTML)
            return

        blocks = []
        for message in messages:
            if message.role == "user":
                text = escape(message.content).replace("\n", "<br>")
                blocks.append(f"<p><b style='color:#a78bfa;'>You</b><br>{text}</p>")
            else:
                blocks.append(
                    "<p><b style='color:#34d399;'>Sitesmith</b><br>"
                    f"<i>Website updated ({len(message.content):,} characters of HTML).</i></p>"
                )
        self.setHtml("".join(blocks))
        scrollbar = self.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

