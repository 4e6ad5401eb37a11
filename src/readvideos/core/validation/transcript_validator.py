#!/usr/bin/env python3
"""
Transcript validation module for analyzing transcription outputs.

This module provides validation of combined transcripts including:
- Chronological order verification
- Gap detection with configurable thresholds
- Failed chunk identification
- Overlap detection
"""

import logging
from typing import List

from ...models import TranscriptRecord, TranscriptSegment, ValidationIssue, ValidationResults

logger = logging.getLogger(__name__)

# Float noise from summing chunk durations must not count as an overlap.
TIME_TOLERANCE = 1e-6


class TranscriptValidator:
    """
    Validates transcript records for various quality issues.

    Validation only reports. It never changes the record and never fails a
    pipeline run.
    """

    def __init__(self, gap_threshold_seconds: float = 10.0):
        """
        Initialize the transcript validator.

        Args:
            gap_threshold_seconds: Minimum gap duration to report as an issue
        """
        self.gap_threshold_seconds = gap_threshold_seconds

    def validate(self, record: TranscriptRecord) -> ValidationResults:
        """
        Validate a transcript record.

        Args:
            record: Combined transcript

        Returns:
            ValidationResults: Validation results
        """
        segments = record.segments

        order_issues = self._check_chronological_order(segments)
        gap_issues = self._check_gaps(segments)
        overlap_issues = self._check_overlaps(segments)
        failed_issues = self._check_failed_chunks(segments)

        issues = order_issues + gap_issues + overlap_issues + failed_issues
        failed_chunks = [issue.chunk_index for issue in failed_issues if issue.chunk_index is not None]

        results = ValidationResults(
            total_entries=len(segments),
            total_duration_seconds=record.duration_seconds,
            issues=issues,
            chronological_order_valid=not order_issues,
            gap_threshold_seconds=self.gap_threshold_seconds,
            gaps_found=len(gap_issues),
            failed_chunks=failed_chunks,
            overlaps_found=len(overlap_issues),
            validation_passed=not any(issue.severity == 'error' for issue in issues),
        )
        return results

    def _check_chronological_order(self, segments: List[TranscriptSegment]) -> List[ValidationIssue]:
        issues = []
        for i in range(1, len(segments)):
            prev, curr = segments[i - 1], segments[i]
            if curr.start + TIME_TOLERANCE < prev.start:
                issues.append(ValidationIssue(
                    issue_type='chronological_order',
                    severity='error',
                    start_time=curr.start,
                    end_time=curr.end,
                    description=f"Segment starts at {curr.start:.2f}s, before previous segment at {prev.start:.2f}s",
                    entry_index=i,
                    chunk_index=curr.chunk_index,
                ))
        return issues

    def _check_gaps(self, segments: List[TranscriptSegment]) -> List[ValidationIssue]:
        """
        Check for gaps in the transcript that exceed the threshold.

        Long silences in the source audio show up here too, so gaps are
        warnings rather than errors.
        """
        issues = []
        if not segments:
            return issues

        if segments[0].start > self.gap_threshold_seconds:
            issues.append(ValidationIssue(
                issue_type='gap',
                severity='warning',
                start_time=0.0,
                end_time=segments[0].start,
                description=f"Gap at beginning of transcript: {segments[0].start:.2f} seconds",
                entry_index=0,
            ))

        for i in range(1, len(segments)):
            gap_duration = segments[i].start - segments[i - 1].end
            if gap_duration > self.gap_threshold_seconds:
                issues.append(ValidationIssue(
                    issue_type='gap',
                    severity='warning',
                    start_time=segments[i - 1].end,
                    end_time=segments[i].start,
                    description=f"Gap between segments: {gap_duration:.2f} seconds",
                    entry_index=i,
                ))
        return issues

    def _check_overlaps(self, segments: List[TranscriptSegment]) -> List[ValidationIssue]:
        issues = []
        for i in range(1, len(segments)):
            prev, curr = segments[i - 1], segments[i]
            overlap = prev.end - curr.start
            if overlap > TIME_TOLERANCE:
                issues.append(ValidationIssue(
                    issue_type='overlap',
                    severity='warning',
                    start_time=curr.start,
                    end_time=prev.end,
                    description=f"Segment overlaps previous segment by {overlap:.2f} seconds",
                    entry_index=i,
                    chunk_index=curr.chunk_index,
                ))
        return issues

    def _check_failed_chunks(self, segments: List[TranscriptSegment]) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                issue_type='failed_chunk',
                severity='error',
                start_time=segment.start,
                end_time=segment.end,
                description=segment.text,
                entry_index=i,
                chunk_index=segment.chunk_index,
            )
            for i, segment in enumerate(segments)
            if segment.failed
        ]

    def log_summary(self, results: ValidationResults) -> None:
        """Log a one-line validation summary plus any failed chunks."""
        summary = results.get_summary()
        logger.info(
            "Validation %s: %d issue(s) (errors=%d, warnings=%d), gaps=%d, overlaps=%d, failed chunks=%d",
            "passed" if summary['validation_passed'] else "failed",
            summary['total_issues'], summary['errors'], summary['warnings'],
            summary['gaps_found'], summary['overlaps_found'], summary['failed_chunks'],
        )
        for issue in results.issues:
            if issue.issue_type == 'failed_chunk':
                logger.warning("Chunk %s: %s", issue.chunk_index, issue.description)
