from __future__ import annotations

"""
BPE Token Counting Service.

Provides token counts for processed texts using the tiktoken library.
The modern 'o200k_base' vocabulary is preferred; 'cl100k_base' is used
when the former cannot be loaded. The encoder is resolved lazily, once,
and shared by every caller of the module-level facade.

Token counts are reported alongside batch results but never feed the
batch progress counters, which stay byte-based.
"""

import logging
import threading
from typing import Optional, Tuple

import tiktoken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# ENCODING PREFERENCES
# -----------------------------------------------------------------------------

PREFERRED_ENCODINGS: Tuple[str, ...] = ("o200k_base", "cl100k_base")


class TokenizerError(RuntimeError):
    """Raised when no BPE vocabulary can be loaded."""


# -----------------------------------------------------------------------------
# SERVICE
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Lazily-initialized wrapper around a tiktoken encoding.

    Thread-safe: the first caller loads the vocabulary under a lock and all
    later calls reuse it.
    """

    def __init__(self, encodings: Tuple[str, ...] = PREFERRED_ENCODINGS) -> None:
        """
        Initialize the service without loading any vocabulary.

        Args:
            encodings: Encoding names to try, in order of preference.
        """
        self._encodings = encodings
        self._encoding: Optional[tiktoken.Encoding] = None
        self._lock = threading.Lock()

    @property
    def encoding_name(self) -> str:
        """Name of the loaded encoding (loads it if necessary)."""
        return self._get_encoding().name

    def count(self, text: Optional[str]) -> int:
        """
        Count BPE tokens in a text.

        Special-token markers are encoded as ordinary text.

        Args:
            text: Input string.

        Returns:
            int: Token count, 0 for empty input.

        Raises:
            TokenizerError: If no vocabulary could be loaded.
        """
        if not text:
            return 0
        return len(self._get_encoding().encode_ordinary(text))

    def _get_encoding(self) -> tiktoken.Encoding:
        if self._encoding is not None:
            return self._encoding

        with self._lock:
            if self._encoding is None:
                self._encoding = self._load_encoding()
        return self._encoding

    def _load_encoding(self) -> tiktoken.Encoding:
        errors = []
        for name in self._encodings:
            try:
                encoding = tiktoken.get_encoding(name)
                logger.debug(f"Loaded BPE vocabulary '{name}'.")
                return encoding
            except (ValueError, OSError) as e:
                logger.debug(f"Encoding '{name}' unavailable: {e}")
                errors.append(f"{name}: {e}")
        raise TokenizerError(f"failed to load tokenizer: {'; '.join(errors)}")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

# Singleton instance for global application access
_SERVICE_INSTANCE = TokenizerService()


def count_tokens(text: Optional[str]) -> int:
    """
    Count tokens with the shared service instance.

    Args:
        text: Input string content.

    Returns:
        int: Total token count.
    """
    return _SERVICE_INSTANCE.count(text)


def get_encoding_name() -> str:
    """Name of the vocabulary used by the shared service."""
    return _SERVICE_INSTANCE.encoding_name
