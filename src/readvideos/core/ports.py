#!/usr/bin/env python3
"""
Contracts for the external services the pipeline depends on.

Implementations are passed into :class:`TranscriptionPipeline` explicitly,
so tests can substitute in-memory fakes.
"""

from pathlib import Path
from typing import Optional, Protocol, Union

from ..models import SummaryTask, TranscriptionResponse


class AudioExtractionPort(Protocol):
    """Produces a single audio-only file from a video file."""

    def extract(self, video_path: Union[str, Path]) -> Path:
        """Return the path of the extracted audio. Raises ExtractionError."""
        ...


class TranscriptionClientPort(Protocol):
    """Transcribes one bounded audio payload."""

    def transcribe(
        self,
        audio: bytes,
        *,
        model: str,
        response_format: str = "verbose_json",
        language: Optional[str] = None,
    ) -> TranscriptionResponse:
        """Return the structured transcription of ``audio``."""
        ...


class SummarizationPort(Protocol):
    """Generates derived free text from transcript text."""

    def summarize(self, text: str, task: SummaryTask) -> str:
        """Return markdown for ``task``. Raises SummarizationError."""
        ...
