from __future__ import annotations

"""
Code Minification Engine.

Builds on the comment remover and applies a compaction strategy chosen by
extension family:

- whitespace-significant languages keep their indentation and only lose
  trailing blanks and redundant empty lines;
- JSON is re-serialized in compact form when it parses, otherwise its
  whitespace is collapsed (lossy best-effort fallback);
- markup loses inter-tag whitespace and has whitespace runs collapsed;
- everything else is compacted line by line with literals shielded.
"""

import json
import logging
import re
from enum import Enum
from typing import Optional

from compactor4ai.core.processing.comments import (
    TRAILING_WS,
    TRIPLE_NEWLINES,
    is_within_size_limits,
    remove_comments,
)
from compactor4ai.core.processing.shield import SentinelCollisionError, ShieldedText, shield
from compactor4ai.domain.constants import (
    JSON_EXTENSIONS,
    MARKUP_EXTENSIONS,
    WHITESPACE_SIGNIFICANT_EXTENSIONS,
)
from compactor4ai.domain.grammar import lookup, normalize_extension

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# MINIFICATION PATTERNS
# -----------------------------------------------------------------------------

_LEADING_WS: re.Pattern = re.compile(r"(?m)^[ \t]+")
_MULTIPLE_NEWLINES: re.Pattern = re.compile(r"\n{2,}")
_JSON_COMMENT: re.Pattern = re.compile(r"/\*[^*]*\*+(?:[^/*][^*]*\*+)*/|//[^\n]*")
_ANGLE_WHITESPACE: re.Pattern = re.compile(r">\s+<")


class MinifyFamily(str, Enum):
    """Compaction strategy selected from the file extension."""

    WHITESPACE_SIGNIFICANT = "whitespace-significant"
    JSON = "json"
    MARKUP = "markup"
    GENERIC = "generic"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def minify_family(extension: str) -> MinifyFamily:
    """
    Classify an extension into its minification family.

    Args:
        extension: File extension (case-insensitive, optional leading dot).

    Returns:
        MinifyFamily: The strategy used by minify().
    """
    ext = normalize_extension(extension)
    if ext in WHITESPACE_SIGNIFICANT_EXTENSIONS:
        return MinifyFamily.WHITESPACE_SIGNIFICANT
    if ext in JSON_EXTENSIONS:
        return MinifyFamily.JSON
    if ext in MARKUP_EXTENSIONS:
        return MinifyFamily.MARKUP
    return MinifyFamily.GENERIC


def minify(code: str, extension: str) -> str:
    """
    Minify source code in-memory.

    Comments are always removed first. Inputs outside the processing size
    bounds are returned unchanged.

    Args:
        code: Raw source text.
        extension: File extension selecting comment grammar and strategy.

    Returns:
        str: Minified text.
    """
    if not code:
        return code or ""
    if not is_within_size_limits(code):
        return code

    result = remove_comments(code, extension)
    family = minify_family(extension)

    if family is MinifyFamily.WHITESPACE_SIGNIFICANT:
        result = TRAILING_WS.sub("", result)
        result = TRIPLE_NEWLINES.sub("\n\n", result)
        result = result.strip()
    elif family is MinifyFamily.JSON:
        result = _minify_json(result, extension)
    elif family is MinifyFamily.MARKUP:
        result = _ANGLE_WHITESPACE.sub("><", result)
        result = _collapse_whitespace(result)
    else:
        result = _minify_generic(result, extension)

    if len(code) > 0:
        reduction = 100 - (len(result) * 100 / len(code))
        logger.debug(f"Minified {extension} [{family.value}]: {len(code)} -> {len(result)} chars ({reduction:.1f}% reduction)")
    return result


# -----------------------------------------------------------------------------
# FAMILY STRATEGIES
# -----------------------------------------------------------------------------

def _minify_json(text: str, extension: str) -> str:
    """Re-serialize JSON compactly, collapsing whitespace if it does not parse."""
    shielded = _try_shield(text, extension)
    if shielded is None:
        cleaned = _JSON_COMMENT.sub("", text)
    else:
        cleaned = shielded.restore(_JSON_COMMENT.sub("", shielded.text))

    try:
        parsed = json.loads(cleaned, parse_constant=_reject_constant)
        # Overflowing numbers such as 1e400 parse to inf; refuse to emit them
        return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (ValueError, RecursionError) as e:
        logger.debug(f"JSON parse failed ({e}); falling back to whitespace collapsing.")
        return _collapse_whitespace(text)


def _reject_constant(name: str) -> None:
    """Refuse the non-standard NaN and Infinity literals Python's parser accepts."""
    raise ValueError(f"Non-standard JSON constant: {name}")


def _minify_generic(text: str, extension: str) -> str:
    """Compact whitespace line by line while keeping literal contents intact."""
    shielded = _try_shield(text, extension)
    if shielded is None:
        return text

    working = TRAILING_WS.sub("", shielded.text)
    working = _MULTIPLE_NEWLINES.sub("\n", working)
    working = _LEADING_WS.sub(" ", working)
    working = working.strip()

    return shielded.restore(working)


def _collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def _try_shield(text: str, extension: str) -> Optional[ShieldedText]:
    grammar = lookup(extension)
    triple_quoted = grammar is not None and grammar.triple_quoted
    try:
        return shield(text, triple_quoted=triple_quoted)
    except SentinelCollisionError as e:
        logger.warning(f"Literal shielding unavailable during minification: {e}")
        return None
