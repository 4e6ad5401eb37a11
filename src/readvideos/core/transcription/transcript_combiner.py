#!/usr/bin/env python3
"""
Transcript combination functionality for the transcription pipeline.

This module handles combining transcript segments from multiple chunks into
a unified transcript on one continuous timeline.
"""

import logging
from typing import List, Sequence

from ...exceptions import AggregationError
from ...models import ChunkResult, TranscriptRecord, TranscriptSegment

logger = logging.getLogger(__name__)


def failure_placeholder_text(chunk_index: int, error: str) -> str:
    """Text of the segment that stands in for a chunk that failed."""
    return f"[Transcription failed for chunk {chunk_index + 1}: {error}]"


class TranscriptCombiner:
    """
    Handles combining chunk results into a single transcript record.

    The speech-to-text service reports times relative to the start of each
    chunk. Every chunk's segments are shifted by the summed duration of all
    chunks before it, so the combined transcript reads as one timeline from
    the start of the audio.
    """

    def aggregate(self, results: Sequence[ChunkResult]) -> TranscriptRecord:
        """
        Combine chunk results, in chunk order, into a transcript record.

        A failed chunk contributes one zero-length placeholder segment at the
        current offset, marked ``failed`` and attributed to that chunk. It does
        not advance the offset since its duration is unknown.

        Args:
            results: One result per chunk, ordered by chunk index

        Returns:
            TranscriptRecord with empty summary and topics

        Raises:
            AggregationError: If results are out of order or duplicated
        """
        self._check_order(results)

        segments: List[TranscriptSegment] = []
        offset = 0.0

        for result in results:
            if result.ok:
                for segment in result.segments:
                    segments.append(segment.shifted(offset, chunk_index=result.chunk_index))
                offset += result.response.effective_duration
            else:
                segments.append(TranscriptSegment(
                    start=offset,
                    end=offset,
                    text=failure_placeholder_text(result.chunk_index, result.error or "unknown error"),
                    chunk_index=result.chunk_index,
                    failed=True,
                ))

        logger.info(
            "Combined %d chunk(s) into %d segment(s) spanning %.1fs",
            len(results), len(segments), offset,
        )
        return TranscriptRecord(segments=segments)

    @staticmethod
    def _check_order(results: Sequence[ChunkResult]) -> None:
        previous = -1
        for result in results:
            if result.chunk_index <= previous:
                raise AggregationError(
                    f"Chunk results out of order: chunk {result.chunk_index} after chunk {previous}"
                )
            if not result.ok and result.error is None:
                raise AggregationError(f"Chunk {result.chunk_index} has neither a response nor an error")
            previous = result.chunk_index
