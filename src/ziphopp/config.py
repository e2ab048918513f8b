"""Configuration persistence — load and save user preferences."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from ziphopp.models import (
    CONFIG_APP_NAME,
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field              Rule                        Handler
#   ─────────────────  ──────────────────────────  ─────────────────────────
#   history_limit      1 ≤ x ≤ MAX_HISTORY_LIMIT   coerce_history_limit
#   scalar fields      type-checked                _safe_get
#
CONFIG_FILENAME = "config.json"
HISTORY_DB_FILENAME = "history.db"
DEBUG_LOG_FILENAME = "debug.log"


def get_config_dir() -> Path:
    """Get the per-user config directory.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/ziphopp/
    - macOS: ~/Library/Application Support/ziphopp/
    - Windows: %APPDATA%/ziphopp/
    """
    return Path(user_config_dir(CONFIG_APP_NAME))


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / CONFIG_FILENAME


def get_history_db_path() -> Path:
    """Get the path to the recent-files SQLite database."""
    return get_config_dir() / HISTORY_DB_FILENAME


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type):
        return default
    # bool is an int subclass; don't let True/False pass as a count
    if expected_type is int and isinstance(value, bool):
        return default
    return value


def coerce_history_limit(value: Any) -> int:
    """Validate and clamp the number of recent files kept by the backend."""
    if not isinstance(value, int) or isinstance(value, bool):
        return DEFAULT_HISTORY_LIMIT
    return max(1, min(value, MAX_HISTORY_LIMIT))


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "history_limit": coerce_history_limit(config.history_limit),
        "start_directory": config.start_directory,
        "show_hidden_files": config.show_hidden_files,
    }


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    return UserConfig(
        history_limit=coerce_history_limit(data.get("history_limit", DEFAULT_HISTORY_LIMIT)),
        start_directory=_safe_get(data, "start_directory", "", str),
        show_hidden_files=_safe_get(data, "show_hidden_files", False, bool),
        version=_safe_get(data, "version", 1, int),
    )


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        return UserConfig()
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return UserConfig()

    if not isinstance(data, dict):
        logger.warning("Config file has invalid structure, using defaults")
        return UserConfig()
    return _dict_to_config(data)


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically.

    Uses write-to-tempfile + os.replace() so an interrupted write never
    leaves a truncated config file behind.

    Returns True on success, False on failure.
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=config_path.parent, suffix=".tmp", prefix=".config-")
        closed = False
        try:
            os.write(fd, json_str.encode("utf-8"))
            os.close(fd)
            closed = True
            os.replace(tmp_path, config_path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


__all__ = [
    "CONFIG_FILENAME",
    "DEBUG_LOG_FILENAME",
    "HISTORY_DB_FILENAME",
    "coerce_history_limit",
    "get_config_dir",
    "get_config_path",
    "get_history_db_path",
    "load_config",
    "save_config",
]
