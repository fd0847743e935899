import logging

from PySide6.QtCore import QRunnable, Slot

logger = logging.getLogger(__name__)


class Worker(QRunnable):
    """
    Runs one blocking call (a generation or a prompt enhancement) on the Qt
    thread pool. Results travel back through the event bus or a signaller,
    never through the worker itself.
    """

    def __init__(self, fn, *args, **kwargs):
        super().__init__()
        self.setAutoDelete(True)
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.task_name = getattr(fn, "__qualname__", repr(fn))

    @Slot()
    def run(self):
        logger.debug("Background task %s started", self.task_name)
        try:
            self.fn(*self.args, **self.kwargs)
        except Exception as e:
            logger.error("Background task %s failed: %s", self.task_name, e, exc_info=True)
            return
        logger.debug("Background task %s finished", self.task_name)
