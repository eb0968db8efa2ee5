from __future__ import annotations

"""
Configuration Domain Management.

Handles the session configuration that drives a scan and its JSON
persistence in the user data directory. Missing or corrupted files fall
back to defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from ckdu.domain.constants import CURRENT_CONFIG_VERSION, DEFAULT_BORING_DIRS
from ckdu.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"

# Per-invocation keys that never enter the persisted session
TRANSIENT_KEYS = ("input_path",)


def get_config_file() -> str:
    """Absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default session configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "input_path": ".",
        "boring_dirs": list(DEFAULT_BORING_DIRS),
        "collapse_boring": True,
        "output_path": "",
        "json_output": False,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the persisted session merged over the defaults.

    Args:
        config_file: Override for the config location.

    Returns:
        Dict[str, Any]: The effective configuration (unvalidated).
    """
    path = config_file or get_config_file()
    config = get_default_config()

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    session = data.get("session", {})
    if isinstance(session, dict):
        config.update({
            k: v for k, v in session.items() if k in config and k not in TRANSIENT_KEYS
        })
    return config


def save_config(config: Dict[str, Any], config_file: Optional[str] = None) -> bool:
    """
    Persist the given session configuration.

    Returns:
        bool: True if the file was written.
    """
    path = config_file or get_config_file()
    state = {
        "version": CURRENT_CONFIG_VERSION,
        "session": {
            k: v for k, v in config.items()
            if k in get_default_config() and k not in TRANSIENT_KEYS
        },
    }
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False

    logger.debug(f"Configuration saved to {path}")
    return True
