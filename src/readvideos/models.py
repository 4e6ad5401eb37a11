#!/usr/bin/env python3
"""
Data models and configuration classes for the transcription pipeline.

This module contains all the data structures, configuration classes,
and type definitions used throughout the transcription pipeline.
"""

import hashlib
import uuid
from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any

from .utils.time_utils import format_segment_range, parse_segment_range


MIB = 1024 * 1024
DEFAULT_MAX_CHUNK_SIZE = 25 * MIB


class FailurePolicy(Enum):
    """What to do when a single chunk fails to transcribe."""
    STRICT = "strict"
    TOLERANT = "tolerant"


class SummaryProvider(Enum):
    """Backends available for summary and topic generation."""
    GEMINI = "gemini"
    OPENAI = "openai"
    NONE = "none"


class SummaryTask(Enum):
    """Derived-text tasks handed to the summarization service."""
    SUMMARY = "summary"
    TOPICS = "topics"


class PipelineStage(Enum):
    """States of a single pipeline run."""
    IDLE = "idle"
    EXTRACTING_AUDIO = "extracting_audio"
    CHUNKING = "chunking"
    TRANSCRIBING = "transcribing"
    AGGREGATING = "aggregating"
    SUMMARIZING = "summarizing"
    PERSISTING = "persisting"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStage.COMPLETE, PipelineStage.FAILED)


@dataclass
class TranscriptionConfig:
    """
    Configuration class for transcription pipeline settings.

    This class provides validation and serialization for pipeline configuration,
    ensuring consistent behavior across different runs.
    """
    # Input
    video_input: str
    display_name: Optional[str] = None

    # Chunking
    max_chunk_size_bytes: int = DEFAULT_MAX_CHUNK_SIZE

    # Chunk failure handling
    failure_policy: FailurePolicy = FailurePolicy.STRICT

    # Speech-to-text settings
    transcription_model: str = "distil-whisper-large-v3-en"
    response_format: str = "verbose_json"
    language: Optional[str] = None

    # Summary settings
    summary_provider: SummaryProvider = SummaryProvider.GEMINI
    summary_model: Optional[str] = None

    # Output settings
    data_dir: str = "data"
    cleanup_audio: bool = True

    # Pipeline version for compatibility
    pipeline_version: str = "1.0"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration parameters."""
        if not self.video_input:
            raise ValueError("video_input cannot be empty")

        if not isinstance(self.max_chunk_size_bytes, int) or self.max_chunk_size_bytes <= 0:
            raise ValueError("max_chunk_size_bytes must be a positive integer")

        if self.max_chunk_size_bytes > 1000 * MIB:
            raise ValueError("max_chunk_size_bytes should not exceed 1000 MiB")

        self.failure_policy = self._coerce_enum(FailurePolicy, self.failure_policy, "failure_policy")
        self.summary_provider = self._coerce_enum(SummaryProvider, self.summary_provider, "summary_provider")

        if not self.transcription_model:
            raise ValueError("transcription_model cannot be empty")

    @staticmethod
    def _coerce_enum(enum_cls, value, name: str):
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str):
            try:
                return enum_cls(value)
            except ValueError:
                raise ValueError(f"Invalid {name}: {value}. Must be one of {[m.value for m in enum_cls]}")
        raise ValueError(f"{name} must be a {enum_cls.__name__} enum or string")

    @property
    def strict(self) -> bool:
        return self.failure_policy is FailurePolicy.STRICT

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary for serialization."""
        config_dict = asdict(self)
        config_dict['failure_policy'] = self.failure_policy.value
        config_dict['summary_provider'] = self.summary_provider.value
        return config_dict

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'TranscriptionConfig':
        """Create configuration from dictionary."""
        return cls(**config_dict)

    def get_config_hash(self) -> str:
        """Generate a hash for this configuration."""
        config_string = (
            f"{self.video_input}_{self.max_chunk_size_bytes}_{self.failure_policy.value}_"
            f"{self.transcription_model}_{self.pipeline_version}"
        )
        return hashlib.sha256(config_string.encode()).hexdigest()[:16]

    def get_display_name(self) -> str:
        """Get a human-readable name for the video being processed."""
        return self.display_name or Path(self.video_input).name

    def __str__(self) -> str:
        """String representation of configuration."""
        return (
            f"TranscriptionConfig(video_input='{self.video_input}', "
            f"max_chunk_size_mb={self.max_chunk_size_bytes / MIB:.1f}, "
            f"failure_policy={self.failure_policy.value}, model={self.transcription_model})"
        )


@dataclass(frozen=True)
class AudioChunk:
    """A contiguous byte slice of an audio payload."""
    index: int
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TranscriptSegment:
    """A timed span of spoken text. Times are in seconds."""
    start: float
    end: float
    text: str
    chunk_index: Optional[int] = None
    failed: bool = False

    @property
    def timestamp(self) -> str:
        """Render as ``MM:SS - MM:SS``."""
        return format_segment_range(self.start, self.end)

    def shifted(self, offset: float, chunk_index: Optional[int] = None) -> 'TranscriptSegment':
        """Return a copy moved forward by ``offset`` seconds."""
        return TranscriptSegment(
            start=self.start + offset,
            end=self.end + offset,
            text=self.text,
            chunk_index=self.chunk_index if chunk_index is None else chunk_index,
            failed=self.failed,
        )

    @classmethod
    def from_api(cls, data: Dict) -> 'TranscriptSegment':
        """Create a segment from a speech-to-text ``segments`` entry."""
        return cls(
            start=float(data.get('start', 0.0)),
            end=float(data.get('end', data.get('start', 0.0))),
            text=str(data.get('text', '')).strip(),
        )

    def to_dict(self) -> Dict:
        """
        Convert to the persisted form.

        ``timestamp`` and ``text`` are the display fields. The exact float
        times and chunk attribution ride along so a reload is lossless.
        """
        result = {
            'timestamp': self.timestamp,
            'text': self.text,
            'start': self.start,
            'end': self.end,
        }
        if self.chunk_index is not None:
            result['chunk'] = self.chunk_index
        if self.failed:
            result['failed'] = True
        return result

    @classmethod
    def from_dict(cls, data: Dict) -> 'TranscriptSegment':
        """Create a segment from its persisted form."""
        if 'start' in data and 'end' in data:
            start, end = float(data['start']), float(data['end'])
        else:
            start, end = parse_segment_range(data.get('timestamp', ''))
        return cls(
            start=start,
            end=end,
            text=data.get('text', ''),
            chunk_index=data.get('chunk'),
            failed=bool(data.get('failed', False)),
        )


@dataclass
class TranscriptionResponse:
    """Structured result returned by the speech-to-text service for one chunk."""
    text: str
    segments: List[TranscriptSegment]
    language: Optional[str] = None
    duration: Optional[float] = None

    @property
    def effective_duration(self) -> float:
        """Chunk length on the audio timeline."""
        if self.duration is not None:
            return float(self.duration)
        if self.segments:
            return max(segment.end for segment in self.segments)
        return 0.0

    @classmethod
    def from_dict(cls, data: Dict) -> 'TranscriptionResponse':
        """Create a response from the service's JSON body."""
        segments = [TranscriptSegment.from_api(segment) for segment in data.get('segments') or []]
        duration = data.get('duration')
        return cls(
            text=data.get('text', ''),
            segments=segments,
            language=data.get('language'),
            duration=float(duration) if duration is not None else None,
        )


@dataclass(frozen=True)
class ChunkResult:
    """
    Outcome of transcribing one chunk.

    Either ``ok`` with the service response, or failed with the chunk index
    and an error description.
    """
    chunk_index: int
    response: Optional[TranscriptionResponse] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, chunk_index: int, response: TranscriptionResponse) -> 'ChunkResult':
        return cls(chunk_index=chunk_index, response=response)

    @classmethod
    def failure(cls, chunk_index: int, error: str) -> 'ChunkResult':
        return cls(chunk_index=chunk_index, error=error)

    @property
    def ok(self) -> bool:
        return self.response is not None

    @property
    def segments(self) -> List[TranscriptSegment]:
        return list(self.response.segments) if self.response else []

    @property
    def text(self) -> str:
        return self.response.text if self.response else ""


@dataclass
class TranscriptRecord:
    """Ordered transcript segments plus derived summary and topics text."""
    segments: List[TranscriptSegment]
    summary: str = ""
    topics: str = ""

    @property
    def text(self) -> str:
        """Plain concatenation of all segment texts."""
        return " ".join(segment.text for segment in self.segments if segment.text)

    @property
    def duration_seconds(self) -> float:
        return max((segment.end for segment in self.segments), default=0.0)

    @property
    def failed_chunks(self) -> List[int]:
        return [s.chunk_index for s in self.segments if s.failed and s.chunk_index is not None]

    def to_dict(self) -> Dict:
        """Convert to the persisted transcript file structure."""
        return {
            'segments': [segment.to_dict() for segment in self.segments],
            'summary': self.summary,
            'topics': self.topics,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'TranscriptRecord':
        """
        Create a record from its persisted form.

        Older files stored ``segments`` as a flat mapping of timestamp string
        to text. Those are read back as segments ordered by start time.

        Raises:
            ValueError: If ``segments`` is neither a list nor a mapping
        """
        raw_segments = data.get('segments')
        if isinstance(raw_segments, list):
            segments = [TranscriptSegment.from_dict(item) for item in raw_segments]
        elif isinstance(raw_segments, dict):
            segments = [
                TranscriptSegment.from_dict({'timestamp': timestamp, 'text': text})
                for timestamp, text in raw_segments.items()
            ]
            segments.sort(key=lambda s: (s.start, s.end))
        elif raw_segments is None:
            segments = []
        else:
            raise ValueError(f"segments must be a list or mapping, got {type(raw_segments).__name__}")

        return cls(
            segments=segments,
            summary=data.get('summary') or '',
            topics=data.get('topics') or '',
        )


@dataclass
class VideoRecord:
    """
    Catalog entry for one transcribed video.

    This class provides a database-like structure for video records. It is
    never mutated after creation; removal from the catalog deletes it.
    """
    id: str
    video_ref: str
    transcript_ref: str
    file_name: str
    created_at: str

    @classmethod
    def create(cls, video_ref: str, transcript_ref: str, file_name: Optional[str] = None) -> 'VideoRecord':
        """Create a new record with a fresh id and the current time."""
        return cls(
            id=str(uuid.uuid4()),
            video_ref=str(video_ref),
            transcript_ref=str(transcript_ref),
            file_name=file_name or Path(video_ref).name,
            created_at=datetime.now().isoformat(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted catalog entry."""
        return {
            'id': self.id,
            'videoRef': self.video_ref,
            'transcriptRef': self.transcript_ref,
            'fileName': self.file_name,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VideoRecord':
        """Create a record from a persisted catalog entry."""
        video_ref = data.get('videoRef') or data.get('videoURL', '')
        return cls(
            id=data['id'],
            video_ref=video_ref,
            transcript_ref=data.get('transcriptRef') or data.get('transcriptionURL', ''),
            file_name=data.get('fileName') or Path(video_ref).name,
            created_at=data.get('createdAt', ''),
        )


@dataclass
class PipelineResults:
    """Results from a completed pipeline run."""
    video_record: VideoRecord
    transcript: TranscriptRecord
    transcript_path: str
    run_id: str
    num_chunks: int
    failed_chunks: List[int] = field(default_factory=list)
    summary_error: Optional[str] = None
    topics_error: Optional[str] = None
    stage_history: List[str] = field(default_factory=list)

    # Runtime tracking fields
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    total_runtime_seconds: Optional[float] = None

    @property
    def partial_success(self) -> bool:
        """True when the run completed but some content is missing or degraded."""
        return bool(self.summary_error or self.topics_error or self.failed_chunks)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            'video_record': self.video_record.to_dict(),
            'transcript': self.transcript.to_dict(),
            'transcript_path': self.transcript_path,
            'run_id': self.run_id,
            'num_chunks': self.num_chunks,
            'failed_chunks': list(self.failed_chunks),
            'summary_error': self.summary_error,
            'topics_error': self.topics_error,
            'partial_success': self.partial_success,
            'stage_history': list(self.stage_history),
            'start_time': self.start_time,
            'end_time': self.end_time,
            'total_runtime_seconds': self.total_runtime_seconds,
        }


@dataclass
class ValidationIssue:
    """Individual validation issue found in transcript."""
    issue_type: str  # 'chronological_order', 'gap', 'failed_chunk', 'overlap'
    severity: str  # 'error', 'warning', 'info'
    start_time: float
    end_time: float
    description: str
    entry_index: Optional[int] = None
    chunk_index: Optional[int] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        result = asdict(self)
        # Remove None values for cleaner output
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class ValidationResults:
    """Results from transcript validation."""
    total_entries: int
    total_duration_seconds: float
    issues: List[ValidationIssue]
    chronological_order_valid: bool
    gap_threshold_seconds: float
    gaps_found: int
    failed_chunks: List[int]
    overlaps_found: int
    validation_passed: bool

    def get_summary(self) -> Dict:
        """Get a summary of validation results."""
        error_count = sum(1 for issue in self.issues if issue.severity == 'error')
        warning_count = sum(1 for issue in self.issues if issue.severity == 'warning')
        info_count = sum(1 for issue in self.issues if issue.severity == 'info')

        return {
            'validation_passed': self.validation_passed,
            'total_issues': len(self.issues),
            'errors': error_count,
            'warnings': warning_count,
            'info': info_count,
            'chronological_order_valid': self.chronological_order_valid,
            'gaps_found': self.gaps_found,
            'failed_chunks': len(self.failed_chunks),
            'overlaps_found': self.overlaps_found
        }
