from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration dictionaries (CLI overrides, persisted
JSON) into strictly typed values, collecting human-readable warnings for
every coercion or fallback instead of failing.
"""

import logging
from typing import Any, Dict, List, Tuple

from compactor4ai.domain.config import get_default_config
from compactor4ai.domain.constants import MODE_RAW, MODE_TAGS
from compactor4ai.infra.logging.config import LEVEL_MAP

logger = logging.getLogger(__name__)

_STRING_FIELDS = ("output_dir", "output_suffix", "log_file")
_BOOL_FIELDS = ("count_tokens",)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(config: Any) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings)

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings)

    mode = _as_str(merged.get("mode"), defaults["mode"], "mode", warnings).lower()
    if mode not in MODE_TAGS:
        warnings.append(f"Unknown processing mode '{mode}'. Falling back to '{MODE_RAW}'.")
        mode = MODE_RAW
    merged["mode"] = mode

    level = _as_str(merged.get("log_level"), defaults["log_level"], "log_level", warnings).upper()
    if level not in LEVEL_MAP:
        warnings.append(f"Unknown log level '{level}'. Using '{defaults['log_level']}'.")
        level = defaults["log_level"]
    merged["log_level"] = level

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str]) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    warnings.append(f"Invalid field '{field}': expected str, received {type(value).__name__}. Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str]) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if isinstance(value, (int, float)) and value in (0, 1):
        warnings.append(f"Field '{field}' converted from number {value} to bool.")
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "1", "yes", "y"):
            warnings.append(f"Field '{field}' converted from '{value}' to True.")
            return True
        if s in ("false", "0", "no", "n"):
            warnings.append(f"Field '{field}' converted from '{value}' to False.")
            return False

    warnings.append(f"Invalid field '{field}': expected bool, received {type(value).__name__}. Using fallback.")
    return fallback
