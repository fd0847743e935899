from __future__ import annotations

from typing import Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from src.sitesmith.models.project import WebsiteProject


class ProjectListWidget(QWidget):
    """
    Sidebar listing the website projects, with new and delete actions.
    """

    project_selected = Signal(str)
    new_project_requested = Signal()
    delete_project_requested = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setMinimumWidth(200)
        self._updating = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self._new_button = QPushButton("+ New Website", self)
        self._new_button.setObjectName("top_bar_button")
        self._new_button.clicked.connect(self.new_project_requested.emit)

        self._list = QListWidget(self)
        self._list.setObjectName("project_list")
        self._list.currentItemChanged.connect(self._on_current_item_changed)

        self._delete_button = QPushButton("Delete", self)
        self._delete_button.clicked.connect(self._on_delete_clicked)

        footer = QHBoxLayout()
        footer.addStretch(1)
        footer.addWidget(self._delete_button)

        layout.addWidget(self._new_button)
        layout.addWidget(self._list, 1)
        layout.addLayout(footer)

    def set_projects(self, projects: Sequence[WebsiteProject], active_project_id: Optional[str]) -> None:
        """Replace the list contents without emitting selection signals."""
        self._updating = True
        try:
            self._list.clear()
            for project in projects:
                item = QListWidgetItem(project.name)
                item.setData(Qt.UserRole, project.id)
                item.setToolTip(project.name)
                self._list.addItem(item)
                if project.id == active_project_id:
                    self._list.setCurrentItem(item)
        finally:
            self._updating = False

    def _on_current_item_changed(self, current: Optional[QListWidgetItem], _previous) -> None:
        if self._updating or current is None:
            return
        self.project_selected.emit(current.data(Qt.UserRole))

    def _on_delete_clicked(self) -> None:
        current = self._list.currentItem()
        if current is not None:
            self.delete_project_requested.emit(current.data(Qt.UserRole))
