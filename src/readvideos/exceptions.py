#!/usr/bin/env python3
"""
Exception types raised by the transcription pipeline.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TranscriptRecord


class ReadVideosError(Exception):
    """Base class for all pipeline errors."""


class ExtractionError(ReadVideosError):
    """The audio track could not be extracted from the video."""


class TranscriptionAPIError(ReadVideosError):
    """The speech-to-text service call failed or returned an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ChunkTranscriptionError(ReadVideosError):
    """A single chunk could not be transcribed."""

    def __init__(self, chunk_index: int, reason: str):
        super().__init__(f"Chunk {chunk_index} failed: {reason}")
        self.chunk_index = chunk_index
        self.reason = reason


class AggregationError(ReadVideosError):
    """Chunk results could not be merged. Indicates a logic error."""


class SummarizationError(ReadVideosError):
    """Summary or topic generation failed. Never fatal to a run."""

    def __init__(self, message: str, task: Optional[str] = None):
        super().__init__(message)
        self.task = task


class PersistenceError(ReadVideosError):
    """A transcript or catalog file could not be read or written."""


class PipelineFailedError(ReadVideosError):
    """
    A pipeline run reached the failed state.

    Carries the stage that failed, the reason, the chunk index when a chunk
    caused the failure, and the in-memory transcript when persistence failed
    after it was built.
    """

    def __init__(
        self,
        stage: str,
        reason: str,
        chunk_index: Optional[int] = None,
        record: Optional['TranscriptRecord'] = None,
    ):
        message = f"Pipeline failed during {stage}: {reason}"
        if chunk_index is not None:
            message += f" (chunk {chunk_index})"
        super().__init__(message)
        self.stage = stage
        self.reason = reason
        self.chunk_index = chunk_index
        self.record = record


class PipelineCancelledError(ReadVideosError):
    """A run was cancelled by the caller."""

    def __init__(self, stage: str):
        super().__init__(f"Pipeline cancelled during {stage}")
        self.stage = stage
