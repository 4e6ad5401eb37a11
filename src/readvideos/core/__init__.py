#!/usr/bin/env python3
"""
Core pipeline modules for the transcription system.

This package contains the core pipeline components including:
- Audio chunking
- Chunked transcription, combination and formatting
- Transcript validation
- The pipeline orchestrator and parallel video processing
"""

from .chunking import AudioChunker, split_audio
from .pipeline import TranscriptionPipeline, generate_run_id
from .processing import ParallelProcessor, VideoRunOutcome
from .transcription import ChunkedTranscriber, TranscriptCombiner, TranscriptFormatter
from .validation import TranscriptValidator

__all__ = [
    'AudioChunker',
    'ChunkedTranscriber',
    'ParallelProcessor',
    'TranscriptCombiner',
    'TranscriptFormatter',
    'TranscriptValidator',
    'TranscriptionPipeline',
    'VideoRunOutcome',
    'generate_run_id',
    'split_audio'
]
