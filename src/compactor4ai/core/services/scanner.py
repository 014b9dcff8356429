from __future__ import annotations

"""
File Discovery and Classification Service.

Expands a list of file and directory paths into file records for the
processing pipeline. Directories are walked recursively with hidden
entries pruned; every file is classified as text or binary by name.
Unreadable, missing or oversized entries are logged and skipped so a
single bad file never aborts a batch read.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from compactor4ai.domain.constants import MAX_FILE_SIZE, TEXT_DOTFILES, TEXT_EXTENSIONS
from compactor4ai.domain.processing_models import FileRecord

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileInfo:
    """
    Metadata and content of a discovered file.

    Attributes:
        name: Base file name.
        path: Absolute filesystem path.
        content: UTF-8 text content (empty for binary files).
        is_text: Whether the file was classified and read as text.
        rel_path: Path relative to the walked directory (or the base name).
    """
    name: str
    path: str
    content: str
    is_text: bool
    rel_path: str = ""


# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

def is_text_file(path: str) -> bool:
    """
    Heuristically decide whether a file holds text, based on its name.

    Args:
        path: File path or name.

    Returns:
        bool: True for known text extensions, well-known extensionless names
              (Makefile, Dockerfile) and configuration dot-files.
    """
    name = os.path.basename(path)
    _, ext = os.path.splitext(name)
    if ext and ext[1:].lower() in TEXT_EXTENSIONS:
        return True

    if name.lower() in TEXT_EXTENSIONS:
        return True

    if name in TEXT_DOTFILES:
        return True

    # Bare dot-files such as '.bashrc'
    return name.startswith(".") and len(name) > 1 and "." not in name[1:]


def is_hidden(rel_path: str) -> bool:
    """Check whether any component of a relative path is hidden."""
    parts = rel_path.replace("\\", "/").split("/")
    return any(p.startswith(".") and p not in (".", "..") for p in parts)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_files_from_paths(paths: Iterable[str]) -> List[FileInfo]:
    """
    Read every file reachable from a list of file or directory paths.

    Args:
        paths: Files and/or directories. Directories are walked recursively,
               following symbolic links, skipping hidden entries.

    Returns:
        List[FileInfo]: Discovered files in deterministic (sorted walk) order.
    """
    files: List[FileInfo] = []

    for raw_path in paths:
        path = os.path.abspath(raw_path)

        if not os.path.exists(path):
            logger.warning(f"Path does not exist: {raw_path}")
            continue

        if os.path.isfile(path):
            info = read_single_file(path, os.path.basename(path))
            if info is not None:
                files.append(info)
        elif os.path.isdir(path):
            for file_path, rel_path in _walk_visible_files(path):
                info = read_single_file(file_path, rel_path)
                if info is not None:
                    files.append(info)

    logger.info(f"Read {len(files)} files from paths")
    return files


def read_single_file(path: str, rel_path: Optional[str] = None) -> Optional[FileInfo]:
    """
    Read one file, enforcing the size ceiling and text classification.

    Args:
        path: Absolute path to the file.
        rel_path: Display path relative to the input root.

    Returns:
        Optional[FileInfo]: File record, or None if the file was skipped.
    """
    name = os.path.basename(path)
    rel = rel_path or name

    try:
        size = os.path.getsize(path)
    except OSError as e:
        logger.warning(f"Cannot stat file, skipping: {path} - {e}")
        return None

    if size > MAX_FILE_SIZE:
        logger.warning(f"File too large, skipping: {path}")
        return None

    if not is_text_file(path):
        return FileInfo(name=name, path=path, content="", is_text=False, rel_path=rel)

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read file as text: {path} - {e}")
        return None

    return FileInfo(name=name, path=path, content=content, is_text=True, rel_path=rel)


def to_records(files: Iterable[FileInfo]) -> List[FileRecord]:
    """
    Convert text files into batch records keyed by their path.

    Args:
        files: Discovered files.

    Returns:
        List[FileRecord]: Records for the text files, in order.
    """
    return [
        FileRecord(id=f.path, name=f.name, content=f.content, path=f.path, is_text=True)
        for f in files
        if f.is_text
    ]


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _walk_visible_files(root_dir: str) -> Iterator[Tuple[str, str]]:
    """Yield (absolute path, relative path) for every non-hidden file."""
    for root, dirs, names in os.walk(root_dir, followlinks=True):
        # In-place pruning keeps os.walk out of hidden directories
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        for file_name in sorted(names):
            file_path = os.path.join(root, file_name)
            rel_path = os.path.relpath(file_path, root_dir)
            if is_hidden(rel_path):
                continue
            if os.path.isfile(file_path):
                yield file_path, rel_path
