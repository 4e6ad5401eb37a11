#!/usr/bin/env python3
"""
Chunk-by-chunk transcription for the transcription pipeline.

This module drives the speech-to-text client across all audio chunks of one
video, strictly in order and one request at a time.
"""

import logging
from typing import Callable, List, Optional, Sequence

from ...exceptions import ChunkTranscriptionError
from ...models import AudioChunk, ChunkResult, FailurePolicy
from ..ports import TranscriptionClientPort

logger = logging.getLogger(__name__)


class ChunkedTranscriber:
    """
    Handles transcription of an ordered sequence of audio chunks.

    Chunks are sent one at a time in index order. A failing chunk either
    aborts the whole sequence (strict policy) or is recorded as a failed
    result while the remaining chunks are still processed (tolerant policy).
    Nothing is retried here; retries belong to the client.
    """

    def __init__(
        self,
        client: TranscriptionClientPort,
        failure_policy: FailurePolicy = FailurePolicy.STRICT,
        model: str = "distil-whisper-large-v3-en",
        response_format: str = "verbose_json",
        language: Optional[str] = None,
    ):
        """
        Initialize the chunked transcriber.

        Args:
            client: Speech-to-text client used for every chunk
            failure_policy: Strict aborts on the first failure, tolerant records it and continues
            model: Model selector passed to the client
            response_format: Response format selector passed to the client
            language: Optional language hint passed to the client
        """
        self.client = client
        self.failure_policy = failure_policy
        self.model = model
        self.response_format = response_format
        self.language = language

    def transcribe_chunk(self, chunk: AudioChunk) -> ChunkResult:
        """
        Transcribe a single chunk.

        Raises:
            ChunkTranscriptionError: If the client fails and the policy is strict
        """
        try:
            response = self.client.transcribe(
                chunk.data,
                model=self.model,
                response_format=self.response_format,
                language=self.language,
            )
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            logger.error("Error transcribing chunk %d: %s", chunk.index + 1, reason)
            if self.failure_policy is FailurePolicy.STRICT:
                raise ChunkTranscriptionError(chunk.index, reason) from e
            return ChunkResult.failure(chunk.index, reason)

        logger.info(
            "Chunk %d transcribed: %d segment(s), %.1fs of audio",
            chunk.index + 1, len(response.segments), response.effective_duration,
        )
        return ChunkResult.success(chunk.index, response)

    def transcribe(
        self,
        chunks: Sequence[AudioChunk],
        before_chunk: Optional[Callable[[AudioChunk], None]] = None,
    ) -> List[ChunkResult]:
        """
        Transcribe all chunks in index order.

        Args:
            chunks: Chunks as produced by the chunker
            before_chunk: Optional hook called before each chunk is dispatched.
                The pipeline uses it to honour cancellation requests.

        Returns:
            One result per chunk, in chunk order

        Raises:
            ChunkTranscriptionError: On the first failure under the strict policy
        """
        ordered = sorted(chunks, key=lambda c: c.index)
        total = len(ordered)
        results = []

        for chunk in ordered:
            if before_chunk is not None:
                before_chunk(chunk)
            logger.info("Transcribing chunk %d/%d (size: %d bytes)", chunk.index + 1, total, chunk.size)
            results.append(self.transcribe_chunk(chunk))

        failed = [result.chunk_index for result in results if not result.ok]
        if failed:
            logger.warning("Transcription finished with %d failed chunk(s): %s", len(failed), failed)
        else:
            logger.info("All %d chunk(s) transcribed successfully", total)
        return results
