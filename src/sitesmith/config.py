from pathlib import Path

# This calculates the absolute path to the project's root directory
# It starts from this file's location (.../src/sitesmith/config.py) and goes up three levels.
ROOT_DIR = Path(__file__).resolve().parent.parent.parent

# All other important paths are built from the ROOT_DIR to ensure they are always correct.
LOGS_DIR = ROOT_DIR / "logs"
SETTINGS_FILE = ROOT_DIR / "user_settings.json"
DATABASE_FILE = ROOT_DIR / "sitesmith_projects.db"

# Environment variable checked before user_settings.json for the OpenRouter key.
API_KEY_ENV_VAR = "OPENROUTER_API_KEY"

# Chat-completion endpoint configuration.
COMPLETION_CONFIG = {
    "endpoint": "https://openrouter.ai/api/v1/chat/completions",
    "model": "qwen/qwen3-coder:free",
    "referer": "https://sitesmith.local",
    "title": "Sitesmith",
    "request_timeout_seconds": 180,
}
