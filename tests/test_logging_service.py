import logging

import pytest

from src.sitesmith.services.logging_service import ColorFormatter, LoggingService


@pytest.fixture
def fresh_logging(monkeypatch):
    monkeypatch.setattr(LoggingService, "_configured", False)
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    level_before = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in handlers_before:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level_before)


def test_setup_writes_log_file(fresh_logging, tmp_path) -> None:
    LoggingService.setup_logging(log_dir=tmp_path / "logs")
    logging.getLogger("sitesmith.test").info("hello from the test")

    for handler in fresh_logging.handlers:
        handler.flush()
    contents = (tmp_path / "logs" / LoggingService.LOG_FILE).read_text(encoding="utf-8")
    assert "hello from the test" in contents
    assert "\x1b[" not in contents


def test_setup_is_idempotent(fresh_logging, tmp_path) -> None:
    LoggingService.setup_logging(log_dir=tmp_path)
    count = len(fresh_logging.handlers)

    LoggingService.setup_logging(log_dir=tmp_path)

    assert len(fresh_logging.handlers) == count


def test_unwritable_log_dir_keeps_console_logging(fresh_logging, tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    handlers_before = len(fresh_logging.handlers)

    LoggingService.setup_logging(log_dir=blocker / "logs")

    assert len(fresh_logging.handlers) == handlers_before + 1
    assert LoggingService._configured is True


def test_color_formatter_wraps_level_colors() -> None:
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "bad thing", None, None)

    formatted = ColorFormatter().format(record)

    assert formatted.startswith(ColorFormatter.RED)
    assert formatted.endswith(ColorFormatter.RESET)
    assert "bad thing" in formatted
