#!/usr/bin/env python3
"""
Audio chunking modules for the transcription pipeline.

This package handles splitting audio into request-sized chunks.
"""

from .audio_chunker import AudioChunker, split_audio

__all__ = [
    'AudioChunker',
    'split_audio'
]
