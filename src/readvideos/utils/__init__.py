#!/usr/bin/env python3
"""
Utility functions for the transcription pipeline.

This module provides common utility functions used throughout the pipeline.
Configuration file helpers live in :mod:`readvideos.utils.config_utils`.
"""

from .time_utils import format_timestamp, format_segment_range, parse_timestamp, parse_segment_range
from .file_utils import (
    atomic_write_text,
    create_safe_filename,
    ensure_directory,
    get_file_size_mb,
    remove_file_quietly,
)

__all__ = [
    'format_timestamp',
    'format_segment_range',
    'parse_timestamp',
    'parse_segment_range',
    'atomic_write_text',
    'create_safe_filename',
    'ensure_directory',
    'get_file_size_mb',
    'remove_file_quietly',
]
