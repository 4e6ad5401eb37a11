#!/usr/bin/env python3
"""
Main transcription pipeline orchestrator.

This module provides the TranscriptionPipeline class that takes one video
through audio extraction, chunked transcription, aggregation, summarization
and persistence.
"""

import datetime
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..exceptions import (
    AggregationError,
    ChunkTranscriptionError,
    PersistenceError,
    PipelineCancelledError,
    PipelineFailedError,
)
from ..models import (
    PipelineResults,
    PipelineStage,
    SummaryTask,
    TranscriptRecord,
    TranscriptionConfig,
    VideoRecord,
)
from ..storage import TranscriptStorage, VideoCatalog
from ..utils.file_utils import get_file_size_mb, remove_file_quietly
from .chunking import AudioChunker
from .ports import AudioExtractionPort, SummarizationPort, TranscriptionClientPort
from .transcription import ChunkedTranscriber, TranscriptCombiner, TranscriptFormatter
from .validation import TranscriptValidator

logger = logging.getLogger(__name__)

StageCallback = Callable[[PipelineStage], None]


def generate_run_id() -> str:
    """Unique, sortable id for one pipeline run."""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"run_{timestamp}_{uuid.uuid4().hex[:8]}"


class _PipelineRun:
    """State machine of a single run. Never shared between runs."""

    def __init__(
        self,
        run_id: str,
        cancel_event: Optional[threading.Event] = None,
        on_stage: Optional[StageCallback] = None,
    ):
        self.run_id = run_id
        self.cancel_event = cancel_event
        self.on_stage = on_stage
        self.stage = PipelineStage.IDLE
        self.history: List[str] = [self.stage.value]

    def enter(self, stage: PipelineStage) -> None:
        if self.stage.is_terminal:
            raise RuntimeError(f"Run {self.run_id} already finished in state {self.stage.value}")
        self.stage = stage
        self.history.append(stage.value)
        logger.info("[%s] %s", self.run_id, stage.value)
        if self.on_stage is not None:
            self.on_stage(stage)

    def fail(
        self,
        reason: str,
        chunk_index: Optional[int] = None,
        record: Optional[TranscriptRecord] = None,
    ) -> PipelineFailedError:
        """Move to the failed state and build the error to raise."""
        failed_stage = self.stage
        logger.error("[%s] Failed during %s: %s", self.run_id, failed_stage.value, reason)
        self.enter(PipelineStage.FAILED)
        return PipelineFailedError(failed_stage.value, reason, chunk_index=chunk_index, record=record)

    def check_cancelled(self) -> None:
        """
        Raises:
            PipelineCancelledError: If the caller asked the run to stop
        """
        if self.cancel_event is None or not self.cancel_event.is_set():
            return
        cancelled_stage = self.stage
        logger.warning("[%s] Cancelled during %s", self.run_id, cancelled_stage.value)
        self.enter(PipelineStage.FAILED)
        raise PipelineCancelledError(cancelled_stage.value)


class TranscriptionPipeline:
    """
    Main transcription pipeline that orchestrates all components.

    Every collaborator is passed in explicitly. The pipeline keeps no state
    between runs, so one instance can serve concurrent runs over different
    videos; the catalog is the only shared resource and serializes its own
    writes.
    """

    def __init__(
        self,
        extractor: AudioExtractionPort,
        transcription_client: TranscriptionClientPort,
        transcript_storage: TranscriptStorage,
        catalog: VideoCatalog,
        summarizer: Optional[SummarizationPort] = None,
        validator: Optional[TranscriptValidator] = None,
        combiner: Optional[TranscriptCombiner] = None,
        formatter: Optional[TranscriptFormatter] = None,
    ):
        """
        Initialize the transcription pipeline.

        Args:
            extractor: Produces the audio file for a video
            transcription_client: Speech-to-text service client
            transcript_storage: Where transcript files are written
            catalog: Video catalog that receives one record per completed run
            summarizer: Summary and topics generator; None skips summarization
            validator: Optional transcript validator, run after aggregation
            combiner: Chunk result aggregator
            formatter: Text renderings of the transcript
        """
        self.extractor = extractor
        self.transcription_client = transcription_client
        self.transcript_storage = transcript_storage
        self.catalog = catalog
        self.summarizer = summarizer
        self.validator = validator
        self.combiner = combiner or TranscriptCombiner()
        self.formatter = formatter or TranscriptFormatter()

    @classmethod
    def from_config(cls, config: TranscriptionConfig, settings=None) -> 'TranscriptionPipeline':
        """
        Build a pipeline with the default service clients.

        Args:
            config: Run configuration; ``data_dir`` and ``summary_provider`` are used here
            settings: Service settings; read from the environment when omitted

        Returns:
            Configured TranscriptionPipeline
        """
        # Default service implementations
        from ..ai import create_summarizer, create_transcription_client
        from ..media import FFmpegAudioExtractor
        from ..utils.config_utils import load_service_settings

        settings = settings or load_service_settings()
        return cls(
            extractor=FFmpegAudioExtractor(),
            transcription_client=create_transcription_client(settings),
            transcript_storage=TranscriptStorage(config.data_dir),
            catalog=VideoCatalog(config.data_dir),
            summarizer=create_summarizer(config.summary_provider, settings, config.summary_model),
            validator=TranscriptValidator(),
        )

    def process_video(
        self,
        config: TranscriptionConfig,
        cancel_event: Optional[threading.Event] = None,
        on_stage: Optional[StageCallback] = None,
    ) -> PipelineResults:
        """
        Process a video through the transcription pipeline.

        Args:
            config: Transcription configuration
            cancel_event: Set it to stop the run at its next suspension point.
                Once persisting has begun the run is no longer cancellable.
            on_stage: Called with each stage the run enters

        Returns:
            PipelineResults for the completed run. ``partial_success`` is set
            when a summary task or a chunk (tolerant policy) failed.

        Raises:
            PipelineFailedError: If extraction, chunking, strict transcription,
                aggregation or persistence fails
            PipelineCancelledError: If ``cancel_event`` was set
        """
        run = _PipelineRun(generate_run_id(), cancel_event, on_stage)
        start_time = time.time()
        logger.info("[%s] Processing %s", run.run_id, config)

        audio_path = None
        try:
            run.check_cancelled()
            run.enter(PipelineStage.EXTRACTING_AUDIO)
            try:
                audio_path = self.extractor.extract(config.video_input)
            except Exception as e:
                raise run.fail(str(e) or e.__class__.__name__) from e
            logger.info("[%s] Extracted audio %s (%.2f MB)", run.run_id, audio_path, get_file_size_mb(audio_path))
            run.check_cancelled()

            run.enter(PipelineStage.CHUNKING)
            try:
                chunks = AudioChunker(config.max_chunk_size_bytes).split_file(audio_path)
            except (OSError, ValueError) as e:
                raise run.fail(f"Could not read audio {audio_path}: {e}") from e
            run.check_cancelled()

            run.enter(PipelineStage.TRANSCRIBING)
            transcriber = ChunkedTranscriber(
                self.transcription_client,
                failure_policy=config.failure_policy,
                model=config.transcription_model,
                response_format=config.response_format,
                language=config.language,
            )
            try:
                results = transcriber.transcribe(chunks, before_chunk=lambda chunk: run.check_cancelled())
            except ChunkTranscriptionError as e:
                raise run.fail(e.reason, chunk_index=e.chunk_index) from e
            run.check_cancelled()

            run.enter(PipelineStage.AGGREGATING)
            try:
                record = self.combiner.aggregate(results)
            except AggregationError as e:
                raise run.fail(str(e)) from e
            if self.validator is not None:
                self.validator.log_summary(self.validator.validate(record))

            run.enter(PipelineStage.SUMMARIZING)
            summary_error, topics_error = self._summarize(record, run)
            run.check_cancelled()

            run.enter(PipelineStage.PERSISTING)
            transcript_path, video_record = self._persist(config, record, run)

            run.enter(PipelineStage.COMPLETE)
        finally:
            if audio_path is not None and config.cleanup_audio:
                remove_file_quietly(audio_path)

        end_time = time.time()
        results = PipelineResults(
            video_record=video_record,
            transcript=record,
            transcript_path=str(transcript_path),
            run_id=run.run_id,
            num_chunks=len(chunks),
            failed_chunks=record.failed_chunks,
            summary_error=summary_error,
            topics_error=topics_error,
            stage_history=list(run.history),
            start_time=datetime.datetime.fromtimestamp(start_time).isoformat(),
            end_time=datetime.datetime.fromtimestamp(end_time).isoformat(),
            total_runtime_seconds=end_time - start_time,
        )
        if results.partial_success:
            logger.warning("[%s] Completed with partial results", run.run_id)
        logger.info("[%s] Completed in %.2f seconds", run.run_id, results.total_runtime_seconds)
        return results

    def _summarize(self, record: TranscriptRecord, run: _PipelineRun) -> Tuple[Optional[str], Optional[str]]:
        """
        Attach summary and topics to the record.

        Both calls are attempted independently. A failure leaves that field
        empty and is returned as an error message instead of being raised.
        """
        if self.summarizer is None:
            logger.info("[%s] No summarizer configured, skipping summary and topics", run.run_id)
            return None, None
        if not record.segments:
            logger.info("[%s] Empty transcript, skipping summary and topics", run.run_id)
            return None, None

        record.summary, summary_error = self._run_task(
            SummaryTask.SUMMARY, self.formatter.to_plain_text(record), run)
        run.check_cancelled()
        record.topics, topics_error = self._run_task(
            SummaryTask.TOPICS, self.formatter.to_timestamped_lines(record), run)
        return summary_error, topics_error

    def _run_task(self, task: SummaryTask, text: str, run: _PipelineRun) -> Tuple[str, Optional[str]]:
        try:
            return self.summarizer.summarize(text, task), None
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            logger.warning("[%s] Could not generate %s: %s", run.run_id, task.value, reason)
            return "", reason

    def _persist(
        self,
        config: TranscriptionConfig,
        record: TranscriptRecord,
        run: _PipelineRun,
    ) -> Tuple[Path, VideoRecord]:
        """
        Write the transcript, then add the video to the catalog.

        If the catalog update fails the transcript just written is deleted,
        so no transcript exists without a catalog entry.
        """
        storage = self.transcript_storage
        transcript_path = storage.get_transcript_path(Path(config.video_input).stem, run.run_id)
        try:
            storage.save_transcript(record, transcript_path)
            storage.save_transcript_text(
                self.formatter.to_readable_text(record, config.get_display_name()),
                transcript_path.with_suffix('.txt'),
            )
            video_record = VideoRecord.create(
                video_ref=config.video_input,
                transcript_ref=str(transcript_path),
                file_name=config.get_display_name(),
            )
            self.catalog.append(video_record)
        except PersistenceError as e:
            try:
                storage.delete_transcript(transcript_path)
            except OSError as cleanup_error:
                logger.error("[%s] Could not remove transcript %s: %s", run.run_id, transcript_path, cleanup_error)
            raise run.fail(str(e), record=record) from e
        return transcript_path, video_record
