import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.sitesmith.config import LOGS_DIR


class ColorFormatter(logging.Formatter):
    """A logging formatter that adds color to console output."""

    GREY = "\x1b[38;20m"
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    CYAN = "\x1b[36;20m"
    RESET = "\x1b[0m"

    BASE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s:%(funcName)s:%(lineno)d - %(message)s"

    # Define the format for each log level
    FORMATS = {
        logging.DEBUG: f"{CYAN}{BASE_FORMAT}{RESET}",
        logging.INFO: f"{GREY}{BASE_FORMAT}{RESET}",
        logging.WARNING: f"{YELLOW}{BASE_FORMAT}{RESET}",
        logging.ERROR: f"{RED}{BASE_FORMAT}{RESET}",
        logging.CRITICAL: f"{BOLD_RED}{BASE_FORMAT}{RESET}",
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.BASE_FORMAT)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


class LoggingService:
    """
    Configures the root logger once per process: a colored console handler and
    a rotating file under the logs directory.
    """
    LOG_FILE = "sitesmith.log"
    MAX_LOG_BYTES = 10 * 1024 * 1024
    BACKUP_COUNT = 5
    # Third-party loggers that are too chatty at DEBUG.
    QUIET_LOGGERS = ("urllib3", "charset_normalizer")
    _configured = False

    @staticmethod
    def setup_logging(log_dir=None, console_level=logging.INFO):
        """
        Attach the console and file handlers to the root logger.

        Repeated calls are ignored. If the log directory cannot be created the
        file handler is skipped and logging continues on the console.
        """
        if LoggingService._configured:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ColorFormatter())
        root_logger.addHandler(console_handler)

        log_dir = Path(log_dir) if log_dir else LOGS_DIR
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_dir / LoggingService.LOG_FILE,
                maxBytes=LoggingService.MAX_LOG_BYTES,
                backupCount=LoggingService.BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as exc:
            logging.warning("File logging disabled, cannot write to %s: %s", log_dir, exc)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(ColorFormatter.BASE_FORMAT))
            root_logger.addHandler(file_handler)

        for name in LoggingService.QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        LoggingService._configured = True
        logging.info("Logging service initialized.")
