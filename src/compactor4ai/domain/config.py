from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences as JSON in the application
data directory, merging stored values over built-in defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from compactor4ai.domain.constants import CURRENT_CONFIG_VERSION, MODE_MINIFY
from compactor4ai.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Processing
        "mode": MODE_MINIFY,
        "count_tokens": True,

        # Output
        "output_dir": "",
        "output_suffix": "",

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


def get_config_path() -> str:
    """Absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk, falling back to defaults.

    Unknown keys are ignored so stale files cannot pollute the schema.

    Args:
        path: Optional explicit file path (defaults to the user data dir).

    Returns:
        Dict[str, Any]: Defaults updated with the persisted values.
    """
    config = get_default_config()
    config_path = path or get_config_path()

    if not os.path.exists(config_path):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load config '{config_path}': {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    for key in config:
        if key in data:
            config[key] = data[key]
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist the configuration to disk.

    Args:
        config: Configuration dictionary.
        path: Optional explicit file path (defaults to the user data dir).

    Returns:
        bool: True if the file was written.
    """
    config_path = path or get_config_path()
    payload = {k: config[k] for k in get_default_config() if k in config}
    payload["version"] = CURRENT_CONFIG_VERSION

    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False

    logger.debug(f"Configuration saved to {config_path}")
    return True
