#!/usr/bin/env python3
"""
Audio chunking functionality for the transcription pipeline.

This module splits an extracted audio payload into size-bounded chunks
that each fit in a single speech-to-text request.
"""

import logging
from pathlib import Path
from typing import List, Union

from ...models import AudioChunk, DEFAULT_MAX_CHUNK_SIZE

logger = logging.getLogger(__name__)


def split_audio(audio: bytes, max_chunk_size: int) -> List[AudioChunk]:
    """
    Split ``audio`` into consecutive chunks of at most ``max_chunk_size`` bytes.

    Chunk ``i`` covers bytes ``[i * max_chunk_size, min((i + 1) * max_chunk_size, len(audio)))``.
    An empty payload yields no chunks.

    Args:
        audio: Raw audio bytes
        max_chunk_size: Upper bound on chunk length in bytes

    Returns:
        Chunks in byte-offset order

    Raises:
        ValueError: If ``max_chunk_size`` is not a positive integer
    """
    if not isinstance(max_chunk_size, int) or isinstance(max_chunk_size, bool) or max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size must be a positive integer, got {max_chunk_size!r}")

    view = memoryview(audio)
    return [
        AudioChunk(index=index, data=bytes(view[offset:offset + max_chunk_size]))
        for index, offset in enumerate(range(0, len(audio), max_chunk_size))
    ]


class AudioChunker:
    """
    Handles audio chunking operations for the transcription pipeline.
    """

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE):
        """
        Initialize the audio chunker.

        Args:
            max_chunk_size: Maximum chunk length in bytes
        """
        if max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        self.max_chunk_size = max_chunk_size

    def split(self, audio: bytes) -> List[AudioChunk]:
        """Split an in-memory payload. See :func:`split_audio`."""
        chunks = split_audio(audio, self.max_chunk_size)
        logger.info(
            "Split %d bytes into %d chunk(s) of at most %d bytes",
            len(audio), len(chunks), self.max_chunk_size,
        )
        return chunks

    def split_file(self, audio_path: Union[str, Path]) -> List[AudioChunk]:
        """
        Read an audio file and split it.

        Args:
            audio_path: Path to the extracted audio file

        Returns:
            Chunks in byte-offset order

        Raises:
            OSError: If the file cannot be read
        """
        with open(audio_path, 'rb') as f:
            audio = f.read()
        return self.split(audio)
