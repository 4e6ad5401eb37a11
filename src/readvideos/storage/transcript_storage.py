#!/usr/bin/env python3
"""
Transcript file storage for the transcription pipeline.

Each transcript record is stored as one JSON file. Files are written whole
through a temporary file and an atomic rename, so a reader never observes a
partially written transcript.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import PersistenceError
from ..models import TranscriptRecord
from ..utils import atomic_write_text, create_safe_filename, ensure_directory

logger = logging.getLogger(__name__)


class TranscriptStorage:
    """
    Handles saving and loading transcript records.
    """

    def __init__(self, base_dir: Union[str, Path]):
        """
        Initialize the transcript storage.

        Args:
            base_dir: Base directory; transcripts go to ``base_dir/transcripts``
        """
        self.base_dir = Path(base_dir)
        self.transcripts_dir = ensure_directory(self.base_dir / "transcripts")

    def get_transcript_path(self, name: str, run_id: Optional[str] = None) -> Path:
        """
        Build the transcript file path for a video.

        Args:
            name: Video name, usually the file stem
            run_id: Optional suffix that keeps repeated runs of one video apart

        Returns:
            Path inside the transcripts directory
        """
        stem = create_safe_filename(name)
        if run_id:
            stem = f"{stem}_{run_id}"
        return self.transcripts_dir / f"{stem}_transcript.json"

    def save_transcript(self, record: TranscriptRecord, path: Union[str, Path]) -> Path:
        """
        Serialize a record and write it in a single atomic step.

        Args:
            record: Transcript record to save
            path: Destination file

        Returns:
            Path to the saved transcript file

        Raises:
            PersistenceError: If the file cannot be written
        """
        content = json.dumps(record.to_dict(), indent=2, ensure_ascii=False)
        try:
            saved = atomic_write_text(path, content)
        except OSError as e:
            raise PersistenceError(f"Could not write transcript {path}: {e}") from e
        logger.info("Transcript saved to %s", saved)
        return saved

    def load_transcript(self, path: Union[str, Path]) -> TranscriptRecord:
        """
        Load a transcript record.

        Both the current list-of-segments layout and the older layout that
        stored segments as a timestamp-to-text mapping are accepted.

        Raises:
            PersistenceError: If the file is missing or not a valid transcript
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise PersistenceError(f"Could not read transcript {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Transcript {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Transcript {path} has unexpected structure: {type(data).__name__}")
        try:
            return TranscriptRecord.from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise PersistenceError(f"Transcript {path} has malformed content: {e}") from e

    def save_transcript_text(self, text: str, path: Union[str, Path]) -> Path:
        """Save the human-readable rendering next to the JSON transcript."""
        try:
            saved = atomic_write_text(path, text)
        except OSError as e:
            raise PersistenceError(f"Could not write transcript text {path}: {e}") from e
        logger.info("Transcript text saved to %s", saved)
        return saved

    def delete_transcript(self, path: Union[str, Path]) -> bool:
        """
        Delete a transcript file and its text rendering.

        Returns:
            True if the JSON transcript existed and was removed
        """
        path = Path(path)
        text_path = path.with_suffix('.txt')
        if text_path.exists():
            text_path.unlink()
        if path.exists():
            path.unlink()
            return True
        return False
