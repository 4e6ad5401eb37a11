#!/usr/bin/env python3
"""
Validation modules for the transcription pipeline.

This package provides transcript validation functionality.
"""

from .transcript_validator import TranscriptValidator

__all__ = [
    'TranscriptValidator'
]
