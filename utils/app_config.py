"""Pre-DB bootstrap configuration. Zero imports from the rest of the app
except constants.

Stores preferences that must be known before opening the DB: the DB folder,
the local user id the ledger is keyed by, and the log level.
Config lives in ~/.dompet/config.json.
"""
import json
import os
from pathlib import Path

from utils.constants import DEFAULT_LOG_LEVEL, DEFAULT_USER_ID

CONFIG_DIR = Path.home() / ".dompet"
CONFIG_FILE = CONFIG_DIR / "config.json"


def load_config(path: Path | None = None) -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(path or CONFIG_FILE, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError):
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict, path: Path | None = None) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = Path(path or CONFIG_FILE)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def ensure_config() -> None:
    """Write a default config on first launch so the file exists for editing."""
    if CONFIG_FILE.exists():
        return
    save_config({"user_id": DEFAULT_USER_ID, "log_level": DEFAULT_LOG_LEVEL})


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def get_user_id() -> str:
    return str(load_config().get("user_id") or DEFAULT_USER_ID)


def get_log_level() -> str:
    return str(load_config().get("log_level") or DEFAULT_LOG_LEVEL).upper()
