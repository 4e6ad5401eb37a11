#!/usr/bin/env python3
"""
Processing modules for the transcription pipeline.

This package handles running several videos concurrently.
"""

from .parallel_processor import ParallelProcessor, VideoRunOutcome

__all__ = [
    'ParallelProcessor',
    'VideoRunOutcome'
]
