#!/usr/bin/env python3
"""
Video catalog - the ordered list of every transcribed video.

The catalog is one JSON file holding a list of video records, most recently
added first. Every change rewrites the whole file (read, modify, write). All
``VideoCatalog`` instances that point at the same file share one lock, so
concurrent pipeline runs in a process cannot lose each other's entries.
The lock does not extend across processes.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..exceptions import PersistenceError
from ..models import VideoRecord
from ..utils import atomic_write_text, ensure_directory, remove_file_quietly

logger = logging.getLogger(__name__)

CATALOG_FILENAME = "transcribedVideos.json"

_catalog_locks: Dict[str, threading.Lock] = {}
_catalog_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _catalog_locks_guard:
        lock = _catalog_locks.get(key)
        if lock is None:
            lock = _catalog_locks[key] = threading.Lock()
        return lock


class VideoCatalog:
    """
    Repository for video records.

    This class provides a database-like interface over the catalog file.
    """

    def __init__(self, base_dir: Union[str, Path] = "data", filename: str = CATALOG_FILENAME):
        """
        Initialize the video catalog.

        Args:
            base_dir: Directory holding the catalog file
            filename: Catalog file name
        """
        self.base_dir = ensure_directory(base_dir)
        self.catalog_path = self.base_dir / filename
        self._lock = _lock_for(self.catalog_path)

    def _read(self) -> List[VideoRecord]:
        if not self.catalog_path.exists():
            return []
        try:
            with open(self.catalog_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise PersistenceError(f"Could not read catalog {self.catalog_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Catalog {self.catalog_path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise PersistenceError(f"Catalog {self.catalog_path} must hold a list, found {type(data).__name__}")
        try:
            return [VideoRecord.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise PersistenceError(f"Catalog {self.catalog_path} has a malformed entry: {e}") from e

    def _write(self, records: List[VideoRecord]) -> None:
        content = json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)
        try:
            atomic_write_text(self.catalog_path, content)
        except OSError as e:
            raise PersistenceError(f"Could not write catalog {self.catalog_path}: {e}") from e

    def load(self) -> List[VideoRecord]:
        """
        Load all video records.

        Returns:
            Records ordered most recently added first; empty if no catalog exists yet
        """
        with self._lock:
            return self._read()

    def append(self, record: VideoRecord) -> VideoRecord:
        """
        Add a record at the front of the catalog.

        A record with the same id replaces the existing one.

        Args:
            record: Video record to add

        Returns:
            The added record
        """
        with self._lock:
            records = [existing for existing in self._read() if existing.id != record.id]
            records.insert(0, record)
            self._write(records)
        logger.info("Added %s to catalog (%d video(s))", record.file_name, len(records))
        return record

    def find_by_id(self, video_id: str) -> Optional[VideoRecord]:
        """Find a record by id."""
        for record in self.load():
            if record.id == video_id:
                return record
        return None

    def remove(self, video_id: str, delete_files: bool = False) -> Optional[VideoRecord]:
        """
        Remove a record from the catalog.

        Args:
            video_id: Record id
            delete_files: Also delete the video file and the transcript files

        Returns:
            The removed record, or None if no record had that id
        """
        with self._lock:
            records = self._read()
            removed = next((record for record in records if record.id == video_id), None)
            if removed is None:
                return None
            self._write([record for record in records if record.id != video_id])

        if delete_files:
            transcript_path = Path(removed.transcript_ref)
            for path in (Path(removed.video_ref), transcript_path, transcript_path.with_suffix('.txt')):
                if remove_file_quietly(path):
                    logger.info("Deleted %s", path)

        logger.info("Removed %s from catalog", removed.file_name)
        return removed

    def count(self) -> int:
        """Number of videos in the catalog."""
        return len(self.load())
