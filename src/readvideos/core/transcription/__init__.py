#!/usr/bin/env python3
"""
Transcription modules for the transcription pipeline.

This package handles chunk transcription, combination, and formatting.
"""

from .chunked_transcriber import ChunkedTranscriber
from .transcript_combiner import TranscriptCombiner, failure_placeholder_text
from .transcript_formatter import TranscriptFormatter

__all__ = [
    'ChunkedTranscriber',
    'TranscriptCombiner',
    'TranscriptFormatter',
    'failure_placeholder_text'
]
