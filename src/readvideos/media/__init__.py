#!/usr/bin/env python3
"""
Media handling for the transcription pipeline.
"""

from .audio_extractor import FFmpegAudioExtractor, validate_video_file

__all__ = [
    'FFmpegAudioExtractor',
    'validate_video_file'
]
