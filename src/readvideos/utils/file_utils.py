#!/usr/bin/env python3
"""
File utility functions for the transcription pipeline.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


def create_safe_filename(filename: str) -> str:
    """
    Create a safe filename by removing/replacing invalid characters.

    Args:
        filename: Original filename

    Returns:
        Safe filename
    """
    invalid_chars = '<>:"/\\|?*'
    safe_filename = filename
    for char in invalid_chars:
        safe_filename = safe_filename.replace(char, '_')

    safe_filename = safe_filename.strip(' .')

    if not safe_filename:
        safe_filename = "unnamed_file"

    return safe_filename


def ensure_directory(path: PathLike) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        Path object
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_size_mb(file_path: PathLike) -> float:
    """Get file size in megabytes, or 0.0 if the file cannot be read."""
    try:
        return os.path.getsize(file_path) / (1024 * 1024)
    except OSError:
        return 0.0


def atomic_write_text(path: PathLike, content: str, encoding: str = "utf-8") -> Path:
    """
    Write ``content`` to ``path`` so readers only ever see a complete file.

    The full content is written to a temporary file in the destination
    directory, flushed to disk, and then moved over ``path`` with
    ``os.replace``. On failure the temporary file is removed and the
    original ``path`` is left untouched.

    Args:
        path: Destination file path
        content: Complete file content
        encoding: Text encoding

    Returns:
        The destination path
    """
    path = Path(path)
    ensure_directory(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
    return path


def remove_file_quietly(path: PathLike) -> bool:
    """
    Remove a file if it exists.

    Failures other than a missing file are logged, not raised.

    Returns:
        True if a file was removed
    """
    try:
        Path(path).unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
