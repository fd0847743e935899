import json
import logging
import os
from typing import Any, Dict, Optional

from src.sitesmith.config import API_KEY_ENV_VAR, COMPLETION_CONFIG, SETTINGS_FILE

logger = logging.getLogger(__name__)

# Baseline API key structure for the settings payload.
DEFAULT_API_KEYS = {
    "openrouter": "",
}


def _default_settings() -> Dict[str, Any]:
    return {
        "model": COMPLETION_CONFIG["model"],
        "api_keys": DEFAULT_API_KEYS.copy(),
        "request_timeout_seconds": COMPLETION_CONFIG["request_timeout_seconds"],
    }


def _normalize_model(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return fallback


def _normalize_timeout(value: Any, fallback: float) -> float:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)) and value > 0:
        return value
    return fallback


def _sanitize_api_keys(api_keys: Any) -> Dict[str, str]:
    sanitized = DEFAULT_API_KEYS.copy()
    if isinstance(api_keys, dict):
        for key in sanitized.keys():
            value = api_keys.get(key)
            if isinstance(value, str):
                sanitized[key] = value.strip()
    return sanitized


def load_user_settings() -> Dict[str, Any]:
    """
    Load user settings from disk, falling back to defaults for anything missing or invalid.
    """
    settings = _default_settings()

    if not SETTINGS_FILE.exists():
        return settings

    try:
        with open(SETTINGS_FILE, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (IOError, json.JSONDecodeError) as exc:
        logger.warning("Failed to read user settings from %s: %s", SETTINGS_FILE, exc)
        return settings

    if not isinstance(data, dict):
        logger.warning("User settings file %s does not contain a JSON object.", SETTINGS_FILE)
        return settings

    settings["model"] = _normalize_model(data.get("model"), settings["model"])
    settings["api_keys"] = _sanitize_api_keys(data.get("api_keys"))
    settings["request_timeout_seconds"] = _normalize_timeout(
        data.get("request_timeout_seconds"),
        settings["request_timeout_seconds"],
    )
    return settings


def save_user_settings(settings: Dict[str, Any]) -> None:
    """
    Persist the settings payload to disk.
    """
    defaults = _default_settings()
    payload: Dict[str, Any] = {
        "model": _normalize_model(settings.get("model"), defaults["model"]),
        "api_keys": _sanitize_api_keys(settings.get("api_keys")),
        "request_timeout_seconds": _normalize_timeout(
            settings.get("request_timeout_seconds"),
            defaults["request_timeout_seconds"],
        ),
    }

    SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_FILE, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=4)

    logger.info("User settings saved to %s", SETTINGS_FILE)


def update_api_key(api_key: str) -> Dict[str, Any]:
    """
    Store a new OpenRouter API key in the settings file.
    """
    settings = load_user_settings()
    settings["api_keys"]["openrouter"] = (api_key or "").strip()
    save_user_settings(settings)
    return settings


def resolve_api_key(settings: Optional[Dict[str, Any]] = None) -> Optional[str]:
    """
    Find the OpenRouter API key.

    The environment variable wins over user_settings.json.

    Returns:
        API key string if found, None otherwise.
    """
    api_key = os.getenv(API_KEY_ENV_VAR)
    if api_key and api_key.strip():
        logger.debug("Using API key from %s environment variable", API_KEY_ENV_VAR)
        return api_key.strip()

    if settings is None:
        settings = load_user_settings()
    api_key = (settings.get("api_keys") or {}).get("openrouter")
    if isinstance(api_key, str) and api_key.strip():
        logger.debug("Using API key from user_settings.json")
        return api_key.strip()

    logger.debug("No API key found in environment or user_settings.json")
    return None
