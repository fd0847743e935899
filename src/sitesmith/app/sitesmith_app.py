import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from src.providers.openrouter_provider import OpenRouterProvider
from src.sitesmith.app.event_bus import EventBus
from src.sitesmith.config import DATABASE_FILE
from src.sitesmith.services.completion_service import CompletionService
from src.sitesmith.services.logging_service import LoggingService
from src.sitesmith.services.project_persistence_service import SqliteProjectStorage
from src.sitesmith.services.project_store import ProjectStore
from src.sitesmith.services.user_settings_manager import load_user_settings, resolve_api_key
from src.ui.windows.main_window import MainWindow


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse the command line.

    Args:
        argv: Optional list of CLI arguments to inspect.

    Returns:
        Parsed options; unknown arguments are left for Qt.
    """
    parser = argparse.ArgumentParser(description="Sitesmith - describe a website, watch it get built.")
    parser.add_argument("--db", type=Path, default=DATABASE_FILE, help="SQLite file holding saved projects")
    parser.add_argument("--model", help="Override the completion model for this session")
    parser.add_argument("--debug", action="store_true", help="Log debug output to the console")
    args, _ = parser.parse_known_args(argv)
    return args


class SitesmithApp:
    """
    The main application class for Sitesmith.
    """

    def __init__(self, argv: Optional[List[str]] = None):
        """Initializes the SitesmithApp."""
        argv = sys.argv[1:] if argv is None else argv
        args = parse_args(argv)
        LoggingService.setup_logging(console_level=logging.DEBUG if args.debug else logging.INFO)
        logging.info("Initializing SitesmithApp...")

        settings = load_user_settings()
        provider = OpenRouterProvider(
            resolve_api_key(settings),
            model=args.model or settings["model"],
            timeout=settings["request_timeout_seconds"],
        )
        self.completion_service = CompletionService(provider)

        self.app = QApplication([sys.argv[0], *argv])
        self.app.setOrganizationName("Sitesmith")
        self.app.setApplicationName("Sitesmith")

        self.event_bus = EventBus()
        self.storage = SqliteProjectStorage(args.db)
        self.store = ProjectStore(
            self.storage,
            self.completion_service,
            event_bus=self.event_bus,
        )

        self.main_window = MainWindow(
            self.event_bus,
            store=self.store,
            completion_service=self.completion_service,
        )
        logging.info("SitesmithApp initialized.")

    def run(self) -> int:
        """Show the main window and run the Qt event loop until it exits."""
        self.main_window.show()
        try:
            return self.app.exec()
        finally:
            self.storage.close()


def main() -> None:
    sys.exit(SitesmithApp().run())
