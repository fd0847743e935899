import json

import pytest

from src.sitesmith.config import API_KEY_ENV_VAR, COMPLETION_CONFIG
from src.sitesmith.services import user_settings_manager
from src.sitesmith.services.user_settings_manager import (
    load_user_settings,
    resolve_api_key,
    save_user_settings,
    update_api_key,
)


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "user_settings.json"
    monkeypatch.setattr(user_settings_manager, "SETTINGS_FILE", path)
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    return path


def test_defaults_when_file_missing(settings_file) -> None:
    settings = load_user_settings()

    assert settings == {
        "model": COMPLETION_CONFIG["model"],
        "api_keys": {"openrouter": ""},
        "request_timeout_seconds": COMPLETION_CONFIG["request_timeout_seconds"],
    }


def test_invalid_values_fall_back_to_defaults(settings_file) -> None:
    settings_file.write_text(
        json.dumps({"model": "  ", "api_keys": {"openrouter": 42}, "request_timeout_seconds": -5}),
        encoding="utf-8",
    )

    settings = load_user_settings()

    assert settings["model"] == COMPLETION_CONFIG["model"]
    assert settings["api_keys"] == {"openrouter": ""}
    assert settings["request_timeout_seconds"] == COMPLETION_CONFIG["request_timeout_seconds"]


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_unreadable_file_uses_defaults(settings_file, content) -> None:
    settings_file.write_text(content, encoding="utf-8")

    assert load_user_settings()["model"] == COMPLETION_CONFIG["model"]


def test_save_and_load_round_trip(settings_file) -> None:
    save_user_settings(
        {"model": "some/model", "api_keys": {"openrouter": " sk-file "}, "request_timeout_seconds": 30}
    )

    settings = load_user_settings()

    assert settings["model"] == "some/model"
    assert settings["api_keys"]["openrouter"] == "sk-file"
    assert settings["request_timeout_seconds"] == 30


def test_update_api_key_persists(settings_file) -> None:
    update_api_key("sk-new")

    saved = json.loads(settings_file.read_text(encoding="utf-8"))
    assert saved["api_keys"]["openrouter"] == "sk-new"


def test_environment_key_wins_over_settings(settings_file, monkeypatch) -> None:
    update_api_key("sk-file")
    monkeypatch.setenv(API_KEY_ENV_VAR, "sk-env")

    assert resolve_api_key() == "sk-env"


def test_settings_key_used_without_environment(settings_file) -> None:
    update_api_key("sk-file")

    assert resolve_api_key() == "sk-file"


def test_no_key_anywhere(settings_file, monkeypatch) -> None:
    monkeypatch.setenv(API_KEY_ENV_VAR, "   ")

    assert resolve_api_key({"api_keys": {"openrouter": ""}}) is None
