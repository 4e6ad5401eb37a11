#!/usr/bin/env python3
"""
Storage modules for the transcription pipeline.

This package contains storage-related functionality including:
- Transcript file storage
- The video catalog
"""

from .transcript_storage import TranscriptStorage
from .video_catalog import VideoCatalog, CATALOG_FILENAME

__all__ = [
    'TranscriptStorage',
    'VideoCatalog',
    'CATALOG_FILENAME'
]
