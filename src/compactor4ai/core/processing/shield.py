from __future__ import annotations

"""
String and Template Literal Shield.

Temporarily replaces quoted literals with opaque placeholder tokens so that
regex-driven comment removal and whitespace compaction can never touch
their contents. The scanner works character by character and recognizes
single-quoted, double-quoted and back-quoted (template) literals, including
nested '${...}' interpolation blocks, plus triple-quoted literals for the
languages that have them.

Placeholders take the form '<S>STR<index>END<S>' where '<S>' is a control
character guaranteed to be absent from the original input.
"""

import functools
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from compactor4ai.domain.constants import (
    DEFAULT_SENTINEL,
    PLACEHOLDER_END_TAG,
    PLACEHOLDER_TAG,
    SENTINEL_CANDIDATES,
)

# -----------------------------------------------------------------------------
# SCANNER CONSTANTS
# -----------------------------------------------------------------------------

_OPENER_PATTERN = re.compile(r"[`\"']")


class SentinelCollisionError(ValueError):
    """Raised when every candidate sentinel already occurs in the input."""


# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ShieldedText:
    """
    Result of shielding a text.

    Attributes:
        text: Input with every literal replaced by a placeholder.
        spans: Original literal texts, indexed by placeholder number.
        sentinel: Control character delimiting the placeholders.
    """
    text: str
    spans: Tuple[str, ...]
    sentinel: str = DEFAULT_SENTINEL

    @property
    def pattern(self) -> re.Pattern:
        """Compiled regex matching any placeholder, capturing its index."""
        return _placeholder_pattern(self.sentinel)

    def restore(self, text: str) -> str:
        """Put the original literals back into a (transformed) text."""
        return unshield(text, self.spans, self.sentinel)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def make_placeholder(index: int, sentinel: str = DEFAULT_SENTINEL) -> str:
    """Build the placeholder token for a literal index."""
    return f"{sentinel}{PLACEHOLDER_TAG}{index}{PLACEHOLDER_END_TAG}{sentinel}"


def shield(text: str, triple_quoted: bool = False) -> ShieldedText:
    """
    Replace every string and template literal with a placeholder.

    Quote literals end at the matching unescaped quote or at an unescaped
    newline. With 'triple_quoted' set, a run of three quotes opens a literal
    that may span lines; otherwise it is read as ordinary quote literals, so
    SQL-style doubled quotes ('''') pair up normally. Template literals end at
    the matching unescaped backtick; '${...}' blocks are copied verbatim with
    brace depth tracked so quotes inside them do not close the literal.
    An unterminated literal extends to the end of the input.

    Args:
        text: Source text.
        triple_quoted: Recognize triple-quoted literals.

    Returns:
        ShieldedText: The substituted text and the ordered literal spans.

    Raises:
        SentinelCollisionError: If no safe placeholder delimiter exists.
    """
    if not _OPENER_PATTERN.search(text):
        return ShieldedText(text=text, spans=())

    sentinel = choose_sentinel(text)
    spans: List[str] = []
    parts: List[str] = []

    n = len(text)
    cursor = 0
    while cursor < n:
        match = _OPENER_PATTERN.search(text, cursor)
        if not match:
            break

        start = match.start()
        quote = text[start]
        if quote == "`":
            end = _scan_template(text, start)
        elif triple_quoted and text.startswith(quote * 3, start):
            end = _scan_triple(text, start, quote)
        else:
            end = _scan_quoted(text, start, quote)

        parts.append(text[cursor:start])
        parts.append(make_placeholder(len(spans), sentinel))
        spans.append(text[start:end])
        cursor = end

    if not spans:
        return ShieldedText(text=text, spans=(), sentinel=sentinel)

    parts.append(text[cursor:])
    return ShieldedText(text="".join(parts), spans=tuple(spans), sentinel=sentinel)


def unshield(text: str, spans: Sequence[str], sentinel: str = DEFAULT_SENTINEL) -> str:
    """
    Restore literal spans into a shielded text.

    Placeholders removed by earlier transformations simply stay removed.

    Args:
        text: Shielded (possibly transformed) text.
        spans: Original literals, indexed by placeholder number.
        sentinel: Delimiter used when shielding.

    Returns:
        str: Text with every placeholder replaced by its literal.
    """
    if not spans:
        return text

    def _replace(m: re.Match) -> str:
        index = int(m.group(1))
        if index < len(spans):
            return spans[index]
        return m.group(0)

    return _placeholder_pattern(sentinel).sub(_replace, text)


def choose_sentinel(text: str) -> str:
    """
    Select a placeholder delimiter that does not occur in the text.

    Raises:
        SentinelCollisionError: If every candidate is already present.
    """
    for candidate in SENTINEL_CANDIDATES:
        if candidate not in text:
            return candidate
    raise SentinelCollisionError("No free control character available for literal placeholders.")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

@functools.lru_cache(maxsize=None)
def _placeholder_pattern(sentinel: str) -> re.Pattern:
    s = re.escape(sentinel)
    return re.compile(f"{s}{PLACEHOLDER_TAG}(\\d+){PLACEHOLDER_END_TAG}{s}")


def _scan_quoted(text: str, start: int, quote: str) -> int:
    """Return the end offset of a single-line quote literal."""
    n = len(text)
    i = start + 1
    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n:
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            return i
        i += 1
    return n


def _scan_triple(text: str, start: int, quote: str) -> int:
    """Return the end offset of a triple-quoted literal."""
    n = len(text)
    delimiter = quote * 3
    i = start + 3
    while i < n:
        if text[i] == "\\" and i + 1 < n:
            i += 2
            continue
        if text.startswith(delimiter, i):
            return i + 3
        i += 1
    return n


def _scan_template(text: str, start: int) -> int:
    """Return the end offset of a template literal."""
    n = len(text)
    i = start + 1
    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n:
            i += 2
            continue
        if ch == "`":
            return i + 1
        if ch == "$" and i + 1 < n and text[i + 1] == "{":
            # Interpolation body is copied verbatim; only brace depth matters
            i += 2
            depth = 1
            while i < n and depth > 0:
                if text[i] == "{":
                    depth += 1
                elif text[i] == "}":
                    depth -= 1
                i += 1
            continue
        i += 1
    return n
