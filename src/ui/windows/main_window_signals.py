from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class MainWindowSignaller(QObject):
    """
    Cross-thread signal bridge for prompt enhancement results.
    """

    enhancement_ready = Signal(str)
    enhancement_failed = Signal(str)
