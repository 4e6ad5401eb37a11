#!/usr/bin/env python3
"""
Parallel processing functionality for the transcription pipeline.

This module runs independent pipeline runs, one per video, concurrently.
Chunks within a run are never parallelized.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ...exceptions import ReadVideosError
from ...models import PipelineResults, TranscriptionConfig

logger = logging.getLogger(__name__)


@dataclass
class VideoRunOutcome:
    """Result or error of one video's run."""
    config: TranscriptionConfig
    results: Optional[PipelineResults] = None
    error: Optional[ReadVideosError] = None

    @property
    def success(self) -> bool:
        return self.results is not None


class ParallelProcessor:
    """
    Handles running several videos through a pipeline at the same time.
    """

    def __init__(self, max_workers: int = 4):
        """
        Initialize the parallel processor.

        Args:
            max_workers: Maximum number of videos processed at once
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self.max_workers = max_workers

    def process_videos(
        self,
        process_func: Callable[[TranscriptionConfig], PipelineResults],
        configs: Sequence[TranscriptionConfig],
    ) -> List[VideoRunOutcome]:
        """
        Process videos in parallel using the provided function.

        Args:
            process_func: Runs one video, usually ``pipeline.process_video``
            configs: One configuration per video

        Returns:
            One outcome per configuration, in input order. Pipeline errors are
            captured per video; any other exception propagates.
        """
        outcomes: List[Optional[VideoRunOutcome]] = [None] * len(configs)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(process_func, config): index
                for index, config in enumerate(configs)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                config = configs[index]
                try:
                    outcomes[index] = VideoRunOutcome(config=config, results=future.result())
                except ReadVideosError as e:
                    logger.error("Error processing %s: %s", config.get_display_name(), e)
                    outcomes[index] = VideoRunOutcome(config=config, error=e)

        succeeded = sum(1 for outcome in outcomes if outcome.success)
        logger.info("Processed %d video(s): %d succeeded, %d failed", len(configs), succeeded, len(configs) - succeeded)
        return outcomes
