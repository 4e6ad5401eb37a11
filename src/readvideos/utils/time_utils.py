#!/usr/bin/env python3
"""
Timestamp utility functions for the transcription pipeline.
"""

import logging
from typing import Tuple

logger = logging.getLogger(__name__)


def format_timestamp(seconds: float) -> str:
    """
    Format seconds as MM:SS.

    Minutes are not wrapped into hours, so a 75 minute mark renders as
    ``75:00``.

    Args:
        seconds: Time in seconds

    Returns:
        Formatted timestamp string
    """
    seconds = max(0.0, seconds)
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def format_segment_range(start: float, end: float) -> str:
    """Format a start/end pair as ``MM:SS - MM:SS``."""
    return f"{format_timestamp(start)} - {format_timestamp(end)}"


def parse_timestamp(timestamp: str) -> float:
    """
    Parse a timestamp string to seconds.

    Args:
        timestamp: Timestamp in MM:SS, HH:MM:SS or plain seconds format

    Returns:
        Time in seconds
    """
    try:
        parts = timestamp.strip().split(':')
        if len(parts) == 2:  # MM:SS
            minutes, seconds = parts
            return int(minutes) * 60 + float(seconds)
        elif len(parts) == 3:  # HH:MM:SS
            hours, minutes, seconds = parts
            return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
        else:
            return float(timestamp)
    except ValueError as e:
        logger.warning("Could not parse timestamp '%s': %s, using 0.0", timestamp, e)
        return 0.0


def parse_segment_range(value: str) -> Tuple[float, float]:
    """
    Parse ``MM:SS - MM:SS`` into a (start, end) pair of seconds.

    A single timestamp yields a zero-length range.
    """
    if ' - ' in value:
        start, end = value.split(' - ', 1)
    elif '-' in value:
        start, end = value.split('-', 1)
    else:
        start = end = value
    return parse_timestamp(start), parse_timestamp(end)
