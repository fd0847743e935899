import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from src.sitesmith.config import DATABASE_FILE
from src.sitesmith.models.project import StoreSnapshot, WebsiteProject

logger = logging.getLogger(__name__)

PROJECTS_KEY = "projects"
ACTIVE_PROJECT_ID_KEY = "active-project-id"


class ProjectStorage(ABC):
    """
    Key-value persistence for the project store.

    Subclasses only move strings in and out of a backend; serialization and
    the tolerance for corrupt data live here. Snapshots are never mutated.
    """

    def load(self) -> StoreSnapshot:
        """Read the saved snapshot, returning empty defaults for missing or corrupt data."""
        try:
            raw_projects = self._read(PROJECTS_KEY)
            raw_active_id = self._read(ACTIVE_PROJECT_ID_KEY)
        except Exception as exc:
            logger.error("Failed to read saved projects: %s", exc, exc_info=True)
            return StoreSnapshot()

        return StoreSnapshot(
            projects=self._decode_projects(raw_projects),
            active_project_id=self._decode_active_id(raw_active_id),
        )

    def save(self, snapshot: StoreSnapshot) -> None:
        """Write the snapshot under both keys. Backend errors propagate to the caller."""
        encoded_projects = json.dumps(
            [project.model_dump(mode="json", by_alias=True) for project in snapshot.projects]
        )
        self._write(encoded_projects, snapshot.active_project_id)

    @staticmethod
    def _decode_projects(raw: Optional[str]) -> List[WebsiteProject]:
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Saved projects are not valid JSON, starting empty: %s", exc)
            return []
        if not isinstance(data, list):
            logger.error("Saved projects are not a JSON list, starting empty.")
            return []

        projects: List[WebsiteProject] = []
        for index, record in enumerate(data):
            try:
                projects.append(WebsiteProject.model_validate(record))
            except ValidationError as exc:
                logger.warning("Dropping invalid saved project at position %d: %s", index, exc)
        return projects

    @staticmethod
    def _decode_active_id(raw: Optional[str]) -> Optional[str]:
        if not raw:
            return None
        # Older writers stored the id JSON-encoded; accept both forms.
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            return raw
        return value if isinstance(value, str) and value else raw

    @abstractmethod
    def _read(self, key: str) -> Optional[str]:
        """Return the raw value stored under ``key``, or None."""

    @abstractmethod
    def _write(self, projects_json: str, active_project_id: Optional[str]) -> None:
        """Store both keys; a None active id removes its key."""


class InMemoryProjectStorage(ProjectStorage):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})
        self.save_count = 0

    def _read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def _write(self, projects_json: str, active_project_id: Optional[str]) -> None:
        self.values[PROJECTS_KEY] = projects_json
        if active_project_id:
            self.values[ACTIVE_PROJECT_ID_KEY] = active_project_id
        else:
            self.values.pop(ACTIVE_PROJECT_ID_KEY, None)
        self.save_count += 1


class SqliteProjectStorage(ProjectStorage):
    """
    Persists the project snapshot to a key-value table in SQLite, with a
    graceful in-memory fallback when the database is unavailable or corrupted.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = Path(db_path) if db_path else DATABASE_FILE
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._fallback_mode = False
        self._fallback_values: Dict[str, str] = {}

        self._initialize_database()

    # --------------------------------------------------------------------- #
    # Initialization & teardown
    # --------------------------------------------------------------------- #
    def _initialize_database(self) -> None:
        """Attempt to set up the SQLite database; enable in-memory fallback on failure."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self._connection.execute("PRAGMA journal_mode=WAL;")
            self._create_schema()
            logger.info("Project persistence initialized at %s", self.db_path)
        except (OSError, sqlite3.Error) as exc:
            logger.error(
                "Failed to initialize project database at %s: %s. "
                "Falling back to in-memory storage.",
                self.db_path,
                exc,
            )
            self._activate_fallback_mode()

    def _create_schema(self) -> None:
        """Create the key-value table if it does not already exist."""
        if not self._connection:
            return
        with self._connection:
            self._connection.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )

    def close(self) -> None:
        """Close the SQLite connection if it is open."""
        if self._connection:
            try:
                self._connection.close()
            except sqlite3.Error:
                logger.debug("Failed to close project database connection cleanly.", exc_info=True)
        self._connection = None

    def _activate_fallback_mode(self) -> None:
        """Switch to in-memory persistence to ensure the app remains functional."""
        self._fallback_mode = True
        self.close()

    @property
    def fallback_mode(self) -> bool:
        return self._fallback_mode

    # --------------------------------------------------------------------- #
    # Key-value access
    # --------------------------------------------------------------------- #
    def _read(self, key: str) -> Optional[str]:
        if self._fallback_mode:
            return self._fallback_values.get(key)

        try:
            with self._lock:
                cursor = self._connection.execute(  # type: ignore[union-attr]
                    "SELECT value FROM kv_store WHERE key = ?;",
                    (key,),
                )
                row = cursor.fetchone()
                return row[0] if row else None
        except sqlite3.DatabaseError as exc:
            logger.error("Database error while reading '%s': %s", key, exc, exc_info=True)
            self._activate_fallback_mode()
            return self._fallback_values.get(key)

    def _write(self, projects_json: str, active_project_id: Optional[str]) -> None:
        if self._fallback_mode:
            self._write_fallback(projects_json, active_project_id)
            return

        try:
            with self._lock:
                if not self._connection:
                    raise sqlite3.OperationalError("Project database connection is not available.")
                with self._connection:
                    self._connection.execute(
                        "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?);",
                        (PROJECTS_KEY, projects_json),
                    )
                    if active_project_id:
                        self._connection.execute(
                            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?);",
                            (ACTIVE_PROJECT_ID_KEY, active_project_id),
                        )
                    else:
                        self._connection.execute(
                            "DELETE FROM kv_store WHERE key = ?;",
                            (ACTIVE_PROJECT_ID_KEY,),
                        )
        except sqlite3.DatabaseError as exc:
            logger.error("Database error while saving projects: %s", exc, exc_info=True)
            self._activate_fallback_mode()
            self._write_fallback(projects_json, active_project_id)

    def _write_fallback(self, projects_json: str, active_project_id: Optional[str]) -> None:
        self._fallback_values[PROJECTS_KEY] = projects_json
        if active_project_id:
            self._fallback_values[ACTIVE_PROJECT_ID_KEY] = active_project_id
        else:
            self._fallback_values.pop(ACTIVE_PROJECT_ID_KEY, None)
