from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of application state and the last used session
configuration as JSON in the user data directory. Supports migration of
legacy flat files and falls back to defaults on any corruption.
"""

import json
import logging
import os
from typing import Any, Dict

from workspace_mirror.domain import constants as const
from workspace_mirror.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration (Session State).

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Feature switch
        "enabled": True,

        # Workspace
        "workspace_path": os.getcwd(),

        # Remote analysis service
        "upload_endpoint": const.DEFAULT_UPLOAD_ENDPOINT,
        "request_timeout": const.DEFAULT_REQUEST_TIMEOUT,

        # Exclusion policy
        "excluded_folder_names": list(const.DEFAULT_EXCLUDED_FOLDERS),
        "excluded_file_extensions": list(const.DEFAULT_EXCLUDED_EXTENSIONS),

        # Upload eligibility
        "supported_file_extensions": list(const.DEFAULT_SUPPORTED_EXTENSIONS),
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": const.CURRENT_CONFIG_VERSION,
        "app_settings": {
            "locale": "en",
            "log_level": "INFO",
        },
        "last_session": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Legacy flat files (session keys at the top level) are migrated into
    the 'last_session' section and written back.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    default_state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return default_state

    if "upload_endpoint" in data or "workspace_path" in data:
        logger.info("Migrating legacy config schema...")
        default_state["last_session"].update(data)
        save_app_state(default_state)
        return default_state

    if isinstance(data.get("app_settings"), dict):
        default_state["app_settings"].update(data["app_settings"])
    if isinstance(data.get("last_session"), dict):
        default_state["last_session"].update(data["last_session"])

    default_state["version"] = const.CURRENT_CONFIG_VERSION
    return default_state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = const.CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """Retrieve the active configuration (last session merged over defaults)."""
    state = load_app_state()
    defaults = get_default_config()
    defaults.update(state.get("last_session", {}))
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """Save the provided config as the 'last_session'."""
    state = load_app_state()
    state["last_session"] = config
    save_app_state(state)
