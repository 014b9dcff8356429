from __future__ import annotations

"""
Processing Mode Dispatcher.

Single entry point routing a text to the raw, comment-removal or
minification transformation selected by a mode tag.
"""

import os
from typing import Union

from compactor4ai.core.processing.comments import remove_comments
from compactor4ai.core.processing.minifier import minify
from compactor4ai.domain.constants import DEFAULT_EXTENSION
from compactor4ai.domain.processing_models import ProcessingMode


def process(text: str, mode: Union[str, ProcessingMode, None], extension: str) -> str:
    """
    Apply a processing mode to a text.

    Args:
        text: Raw source text.
        mode: "raw", "remove-comments", "minify" or a ProcessingMode.
            Unrecognized tags behave as "raw".
        extension: File extension selecting the grammar.

    Returns:
        str: Transformed text.
    """
    resolved = ProcessingMode.from_tag(mode)
    if resolved is ProcessingMode.REMOVE_COMMENTS:
        return remove_comments(text, extension)
    if resolved is ProcessingMode.MINIFY:
        return minify(text, extension)
    return text


def extension_from_name(name: str) -> str:
    """
    Derive the grammar key from a file name.

    Names without a suffix (including dot-files such as '.bashrc') map to
    the plain-text extension.

    Args:
        name: File name or path.

    Returns:
        str: Extension without the leading dot.
    """
    _, ext = os.path.splitext(os.path.basename(name or ""))
    return ext[1:] if len(ext) > 1 else DEFAULT_EXTENSION
