import json
import logging
import sqlite3
from pathlib import Path

import pytest

from src.sitesmith.models.project import Message, StoreSnapshot, WebsiteProject
from src.sitesmith.services.project_persistence_service import (
    ACTIVE_PROJECT_ID_KEY,
    PROJECTS_KEY,
    InMemoryProjectStorage,
    SqliteProjectStorage,
)


def _sample_snapshot() -> StoreSnapshot:
    project = WebsiteProject(
        name="Bakery",
        chat_history=[
            Message(role="user", content="A bakery site"),
            Message(role="assistant", content="<!DOCTYPE html><html></html>"),
        ],
        generated_code="<!DOCTYPE html><html></html>",
    )
    return StoreSnapshot(projects=[project, WebsiteProject(name="Empty")], active_project_id=project.id)


@pytest.fixture
def sqlite_storage(tmp_path: Path):
    storage = SqliteProjectStorage(tmp_path / "projects.db")
    yield storage
    storage.close()


def test_sqlite_round_trip(sqlite_storage) -> None:
    snapshot = _sample_snapshot()

    sqlite_storage.save(snapshot)

    assert sqlite_storage.load() == snapshot
    assert sqlite_storage.fallback_mode is False


def test_sqlite_survives_reopen(tmp_path: Path) -> None:
    snapshot = _sample_snapshot()
    first = SqliteProjectStorage(tmp_path / "projects.db")
    first.save(snapshot)
    first.close()

    second = SqliteProjectStorage(tmp_path / "projects.db")
    try:
        assert second.load() == snapshot
    finally:
        second.close()


def test_empty_database_loads_defaults(sqlite_storage) -> None:
    loaded = sqlite_storage.load()

    assert loaded.projects == []
    assert loaded.active_project_id is None


def test_saved_json_uses_camel_case_fields() -> None:
    storage = InMemoryProjectStorage()

    storage.save(_sample_snapshot())

    saved = json.loads(storage.values[PROJECTS_KEY])
    assert set(saved[0]) == {"id", "name", "chatHistory", "generatedCode"}
    assert saved[1]["generatedCode"] is None


def test_active_id_is_stored_as_plain_string() -> None:
    storage = InMemoryProjectStorage()
    snapshot = _sample_snapshot()

    storage.save(snapshot)

    assert storage.values[ACTIVE_PROJECT_ID_KEY] == snapshot.active_project_id


def test_json_encoded_active_id_is_accepted() -> None:
    storage = InMemoryProjectStorage({ACTIVE_PROJECT_ID_KEY: json.dumps("website-abc")})

    assert storage.load().active_project_id == "website-abc"


def test_saving_without_active_id_removes_key() -> None:
    storage = InMemoryProjectStorage({ACTIVE_PROJECT_ID_KEY: "website-abc"})

    storage.save(StoreSnapshot())

    assert ACTIVE_PROJECT_ID_KEY not in storage.values
    assert storage.values[PROJECTS_KEY] == "[]"


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"projects": []}),
        json.dumps([{"id": "website-1"}]),
        json.dumps([{"id": "website-1", "name": "Bad", "chatHistory": [{"role": "assistant", "content": "x"}]}]),
    ],
)
def test_malformed_projects_load_as_empty(raw) -> None:
    storage = InMemoryProjectStorage({PROJECTS_KEY: raw, ACTIVE_PROJECT_ID_KEY: "website-1"})

    loaded = storage.load()

    assert loaded.projects == []
    assert loaded.active_project_id == "website-1"


def test_read_failure_loads_defaults() -> None:
    class BrokenStorage(InMemoryProjectStorage):
        def _read(self, key):
            raise OSError("unreadable")

    assert BrokenStorage().load() == StoreSnapshot()


def test_unusable_database_path_falls_back_to_memory(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = SqliteProjectStorage(blocker / "projects.db")
    snapshot = _sample_snapshot()

    storage.save(snapshot)

    assert storage.fallback_mode is True
    assert storage.load() == snapshot


def test_database_error_during_save_switches_to_fallback(sqlite_storage) -> None:
    with sqlite_storage._connection:
        sqlite_storage._connection.execute("DROP TABLE kv_store;")
    snapshot = _sample_snapshot()

    sqlite_storage.save(snapshot)

    assert sqlite_storage.fallback_mode is True
    assert sqlite_storage.load() == snapshot


def test_rows_are_written_to_kv_table(tmp_path: Path) -> None:
    db_path = tmp_path / "projects.db"
    storage = SqliteProjectStorage(db_path)
    storage.save(_sample_snapshot())
    storage.close()

    with sqlite3.connect(db_path) as connection:
        keys = {row[0] for row in connection.execute("SELECT key FROM kv_store;")}

    assert keys == {PROJECTS_KEY, ACTIVE_PROJECT_ID_KEY}


def test_invalid_record_is_dropped_and_valid_ones_kept(caplog) -> None:
    good = WebsiteProject(name="Bakery").model_dump(mode="json", by_alias=True)
    records = [
        good,
        {"id": "website-blank", "name": "  "},
        {"id": "website-orphan", "name": "Orphan", "chatHistory": [{"role": "assistant", "content": "x"}]},
        "not a project",
    ]
    storage = InMemoryProjectStorage({PROJECTS_KEY: json.dumps(records)})

    with caplog.at_level(logging.WARNING):
        loaded = storage.load()

    assert [project.id for project in loaded.projects] == [good["id"]]
    assert "Dropping invalid saved project at position 1" in caplog.text
