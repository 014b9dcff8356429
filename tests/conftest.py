from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration dictionaries and batch records.
"""

import os
import sys
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from compactor4ai.domain.processing_models import FileRecord  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'compactor4ai.domain.config'.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        # Processing
        "mode": "minify",
        "count_tokens": False,

        # Output
        "output_dir": "/tmp/test_output",
        "output_suffix": ".min",

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
    }


@pytest.fixture
def sample_records() -> List[FileRecord]:
    """A small mixed-language batch."""
    return [
        FileRecord(id="1", name="app.js", content="// header\nconst a = 'x // y';\n\n\n\nlet b = 2; // tail\n"),
        FileRecord(id="2", name="tool.py", content="# comment\ndef f():\n    return 1  # done\n"),
        FileRecord(id="3", name="data.json", content='{\n  "a": 1,\n  "b": [1, 2]\n}\n'),
    ]
