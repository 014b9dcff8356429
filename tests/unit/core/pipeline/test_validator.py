from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies:
1. Default value injection.
2. Type coercion (String/Number to Bool).
3. Mode and log level fallbacks with warnings.
"""

from compactor4ai.core.pipeline.validator import validate_config


def test_validate_none_returns_defaults() -> None:
    """Passing None should return the full default configuration."""
    cfg, warnings = validate_config(None)

    assert cfg["mode"] == "minify"
    assert cfg["count_tokens"] is True
    assert len(warnings) == 1


def test_validate_empty_dict_returns_defaults() -> None:
    cfg, warnings = validate_config({})

    assert cfg["output_dir"] == ""
    assert cfg["log_level"] == "INFO"
    assert warnings == []


def test_validate_keeps_valid_config(mock_config_dict) -> None:
    cfg, warnings = validate_config(mock_config_dict)

    assert cfg == mock_config_dict
    assert warnings == []


def test_validate_converts_strings_to_bools() -> None:
    cfg, warnings = validate_config({"count_tokens": "no"})

    assert cfg["count_tokens"] is False
    assert any("count_tokens" in w for w in warnings)


def test_validate_converts_numbers_to_bools() -> None:
    cfg, _ = validate_config({"count_tokens": 0})
    assert cfg["count_tokens"] is False


def test_invalid_bool_uses_default() -> None:
    cfg, warnings = validate_config({"count_tokens": "maybe"})

    assert cfg["count_tokens"] is True
    assert any("expected bool" in w for w in warnings)


def test_unknown_mode_falls_back_to_raw() -> None:
    cfg, warnings = validate_config({"mode": "shrink"})

    assert cfg["mode"] == "raw"
    assert any("shrink" in w for w in warnings)


def test_mode_is_normalized() -> None:
    cfg, warnings = validate_config({"mode": "  Remove-Comments "})

    assert cfg["mode"] == "remove-comments"
    assert warnings == []


def test_unknown_log_level_uses_default() -> None:
    cfg, warnings = validate_config({"log_level": "verbose"})

    assert cfg["log_level"] == "INFO"
    assert warnings


def test_non_string_paths_use_fallback() -> None:
    cfg, warnings = validate_config({"output_dir": 42, "output_suffix": " .min "})

    assert cfg["output_dir"] == ""
    assert cfg["output_suffix"] == ".min"
    assert len(warnings) == 1


def test_unknown_keys_are_dropped() -> None:
    cfg, _ = validate_config({"mode": "raw", "legacy_option": True})

    assert "legacy_option" not in cfg
