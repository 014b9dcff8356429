from __future__ import annotations

"""
Processing Domain Data Models.

Defines the Data Transfer Objects exchanged between the filesystem
enumerator, the batch driver and the interface layer, together with the
processing mode selector and the batch-level error type.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from compactor4ai.domain.constants import MODE_MINIFY, MODE_RAW, MODE_REMOVE_COMMENTS

# -----------------------------------------------------------------------------
# PROCESSING MODE
# -----------------------------------------------------------------------------

class ProcessingMode(str, Enum):
    """Transformation applied to each input text."""

    RAW = MODE_RAW
    REMOVE_COMMENTS = MODE_REMOVE_COMMENTS
    MINIFY = MODE_MINIFY

    @classmethod
    def from_tag(cls, tag: Union[str, "ProcessingMode", None]) -> "ProcessingMode":
        """
        Resolve a mode from its string tag.

        Args:
            tag: Mode tag ("raw", "remove-comments", "minify") or a mode instance.

        Returns:
            ProcessingMode: The matching mode, RAW for anything unrecognized.
        """
        if isinstance(tag, ProcessingMode):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            return cls.RAW


# -----------------------------------------------------------------------------
# BATCH MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileRecord:
    """
    One unit of work for the batch driver.

    Attributes:
        id: Caller-defined identifier echoed back in the result.
        name: File name; its suffix selects the grammar.
        content: Raw text to transform.
        path: Optional source path, informational only.
        is_text: Whether the content is textual.
    """
    id: str
    name: str
    content: str
    path: str = ""
    is_text: bool = True


@dataclass(frozen=True)
class ProcessedFile:
    """Transformed content for a single record."""
    id: str
    content: str


@dataclass(frozen=True)
class ProcessingProgress:
    """
    Cumulative batch status emitted after each record.

    Attributes:
        current_file_name: Name of the record just processed.
        processed_files_count: Records processed so far (1-based).
        total_files_count: Records in the batch.
        processed_bytes: Cumulative UTF-8 input bytes processed.
        total_bytes: UTF-8 input bytes of the whole batch.
        bytes_saved: Cumulative input-minus-output byte delta. Negative
            when the output grew (e.g. JSON re-serialization).
    """
    current_file_name: str
    processed_files_count: int
    total_files_count: int
    processed_bytes: int
    total_bytes: int
    bytes_saved: int

    @property
    def fraction(self) -> float:
        """Completion ratio in the [0, 1] range."""
        if self.total_files_count <= 0:
            return 1.0
        return self.processed_files_count / self.total_files_count


# -----------------------------------------------------------------------------
# ERRORS
# -----------------------------------------------------------------------------

class BatchProcessingError(RuntimeError):
    """Terminal failure of the execution context running a batch."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


# -----------------------------------------------------------------------------
# RUN REPORTING
# -----------------------------------------------------------------------------

@dataclass
class FileReport:
    """
    Per-file outcome of a CLI run.

    Attributes:
        source: Display path of the input ('-' for stdin).
        bytes_in: UTF-8 size of the original content.
        bytes_out: UTF-8 size of the processed content.
        output_path: Destination file, when results were written to disk.
        content: Processed text, when results were not written to disk.
        error: Write failure message, if any.
    """
    source: str
    bytes_in: int
    bytes_out: int
    output_path: Optional[str] = None
    content: Optional[str] = None
    error: Optional[str] = None


@dataclass
class RunSummary:
    """
    Aggregated result of a CLI run, rendered as text or JSON.

    Token counts are None when counting was disabled or unavailable.
    """
    ok: bool
    mode: str
    files: List[FileReport] = field(default_factory=list)
    bytes_in: int = 0
    bytes_out: int = 0
    tokens_in: Optional[int] = None
    tokens_out: Optional[int] = None
    tokenizer: Optional[str] = None

    @property
    def bytes_saved(self) -> int:
        return self.bytes_in - self.bytes_out
