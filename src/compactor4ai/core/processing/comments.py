from __future__ import annotations

"""
Comment Removal Engine.

Strips single-line, block and docstring comments from source text using
the per-extension grammar registry. String and template literals are
shielded for the whole deletion pipeline so comment markers that appear
inside them are never treated as comment starts.

The engine has no error channel: inputs it cannot handle safely (size out
of bounds, unknown extension, sentinel collision) are returned unchanged.
"""

import logging
import re
from typing import List, Optional, Sequence

from compactor4ai.core.processing.shield import SentinelCollisionError, ShieldedText, shield
from compactor4ai.domain.constants import MAX_PROCESS_SIZE, MIN_PROCESS_SIZE
from compactor4ai.domain.grammar import CommentGrammar, lookup

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# NORMALIZATION PATTERNS
# -----------------------------------------------------------------------------

# Three or more line breaks, counting whitespace-only lines as empty
TRIPLE_NEWLINES: re.Pattern = re.compile(r"\n(?:[ \t]*\n){2,}")
TRAILING_WS: re.Pattern = re.compile(r"(?m)[ \t]+$")

# Line endings/beginnings that mean a literal is part of a larger expression
_CONTINUATION_TAILS = ("(", "[", "{", ",", "\\", "=", "+", "-", "*", "/", "%", "|", "&")
_CONTINUATION_HEADS = (")", "]", "}", ",", ".", "+", "%")
_OPEN_BRACKETS = "([{"
_CLOSE_BRACKETS = ")]}"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def is_within_size_limits(code: str) -> bool:
    """
    Check the UTF-8 byte length of a text against the processing bounds.

    Args:
        code: Text to measure.

    Returns:
        bool: True if the text is neither too short nor too large to process.
    """
    size = byte_length(code)
    return MIN_PROCESS_SIZE <= size <= MAX_PROCESS_SIZE


def byte_length(text: Optional[str]) -> int:
    """Return the UTF-8 encoded length of a text."""
    if not text:
        return 0
    return len(text.encode("utf-8", errors="surrogatepass"))


def remove_comments(code: str, extension: str) -> str:
    """
    Remove comments from source code according to its extension.

    Order of operations: shield literals, delete docstrings, delete block
    comments, delete single-line comments, restore literals, collapse runs of
    three or more newlines into one blank line and strip trailing blanks.

    Args:
        code: Raw source text.
        extension: File extension selecting the grammar (dot optional).

    Returns:
        str: Comment-free text, or the input unchanged when it cannot be processed.
    """
    if not code:
        return code or ""
    if not is_within_size_limits(code):
        return code

    grammar = lookup(extension)
    if grammar is None:
        return code

    shielded: Optional[ShieldedText] = None
    working = code
    if grammar.protect_literals:
        try:
            shielded = shield(code, triple_quoted=grammar.triple_quoted)
        except SentinelCollisionError as e:
            logger.warning(f"Literal shielding unavailable for '{extension}': {e}. Leaving input untouched.")
            return code
        working = shielded.text

    if grammar.docstring is not None:
        working = _remove_docstrings(working, grammar, shielded)
    if grammar.block is not None:
        working = grammar.block.sub("", working)
    if grammar.single_line is not None:
        working = grammar.single_line.sub("", working)

    if shielded is not None:
        working = shielded.restore(working)

    working = TRIPLE_NEWLINES.sub("\n\n", working)
    working = TRAILING_WS.sub("", working)

    logger.debug(f"Comments removed ({extension}): {len(code)} -> {len(working)} chars")
    return working


# -----------------------------------------------------------------------------
# DOCSTRING HANDLING
# -----------------------------------------------------------------------------

def _remove_docstrings(text: str, grammar: CommentGrammar, shielded: Optional[ShieldedText]) -> str:
    """
    Delete documentation literals.

    With shielded input, only literals standing alone on their line outside
    any open bracket are candidates; a docstring that is the sole statement
    of a block is turned into 'pass' so the block stays syntactically valid.
    Without shielding the docstring pattern is applied directly to the text.
    """
    if grammar.docstring is None:
        return text
    if shielded is None:
        return grammar.docstring.sub("", text)
    if not shielded.spans:
        return text

    line_rx = re.compile(r"^([ \t]*)" + shielded.pattern.pattern + r"[ \t]*$")
    lines = text.split("\n")
    kept: List[str] = []
    depth = 0

    for idx, line in enumerate(lines):
        # Literals are placeholders here, so brackets counted are code brackets
        line_depth = depth
        depth = _bracket_depth(_code_part(line, grammar), depth)

        m = line_rx.match(line)
        if not m or line_depth > 0:
            kept.append(line)
            continue

        index = int(m.group(2))
        if index >= len(shielded.spans) or not grammar.docstring.fullmatch(shielded.spans[index]):
            kept.append(line)
            continue

        previous = _last_code_line(kept, grammar)
        following = _first_code_line(lines[idx + 1:], grammar)
        if _continues_expression(previous, following):
            kept.append(line)
            continue

        indent = m.group(1)
        if _is_sole_block_statement(previous, following, indent):
            kept.append(f"{indent}pass")

    return "\n".join(kept)


def _code_part(line: str, grammar: CommentGrammar) -> str:
    if grammar.single_line is not None:
        line = grammar.single_line.sub("", line)
    return line.rstrip()


def _bracket_depth(code: str, depth: int) -> int:
    for ch in code:
        if ch in _OPEN_BRACKETS:
            depth += 1
        elif ch in _CLOSE_BRACKETS and depth > 0:
            depth -= 1
    return depth


def _last_code_line(lines: Sequence[str], grammar: CommentGrammar) -> Optional[str]:
    for line in reversed(lines):
        code = _code_part(line, grammar)
        if code.strip():
            return code
    return None


def _first_code_line(lines: Sequence[str], grammar: CommentGrammar) -> Optional[str]:
    for line in lines:
        code = _code_part(line, grammar)
        if code.strip():
            return code
    return None


def _continues_expression(previous: Optional[str], following: Optional[str]) -> bool:
    if previous is not None and previous.endswith(_CONTINUATION_TAILS):
        return True
    if following is not None and following.lstrip().startswith(_CONTINUATION_HEADS):
        return True
    return False


def _is_sole_block_statement(previous: Optional[str], following: Optional[str], indent: str) -> bool:
    if previous is None or not previous.endswith(":"):
        return False
    if following is None:
        return True
    following_indent = len(following) - len(following.lstrip(" \t"))
    return following_indent < len(indent)
