#!/usr/bin/env python3
"""
Transcript formatting functionality for the transcription pipeline.

This module renders a transcript record into the text forms handed to the
summarization service and written next to the transcript file.
"""

from typing import List

from ...models import TranscriptRecord


class TranscriptFormatter:
    """
    Handles formatting transcripts into different output formats.
    """

    def to_plain_text(self, record: TranscriptRecord) -> str:
        """Concatenate all segment texts. Used for summary generation."""
        return " ".join(segment.text.strip() for segment in record.segments if segment.text.strip())

    def to_timestamped_lines(self, record: TranscriptRecord) -> str:
        """
        Render one ``MM:SS - MM:SS: text`` line per segment.

        Used for topic generation so the model can quote timestamp ranges.
        """
        return "\n".join(f"{segment.timestamp}: {segment.text.strip()}" for segment in record.segments)

    def to_readable_text(self, record: TranscriptRecord, title: str = "") -> str:
        """
        Create a human-readable text version of the full transcript.

        Args:
            record: Transcript record
            title: Optional heading, usually the video file name

        Returns:
            Text with header, one bracketed time range per segment, and the
            summary and topics when present
        """
        output_lines: List[str] = []

        output_lines.append("=" * 80)
        output_lines.append("FULL VIDEO TRANSCRIPT")
        output_lines.append("=" * 80)
        if title:
            output_lines.append(f"Video: {title}")
        output_lines.append(f"Total Segments: {len(record.segments)}")
        output_lines.append(f"Total Duration: {record.duration_seconds:.1f} seconds")
        output_lines.append("")

        for segment in record.segments:
            text = segment.text.strip() or "[No speech]"
            output_lines.append(f"[{segment.timestamp}] {text}")

        if record.summary:
            output_lines.extend(["", "=" * 80, "SUMMARY", "=" * 80, record.summary.strip()])
        if record.topics:
            output_lines.extend(["", "=" * 80, "TOPICS", "=" * 80, record.topics.strip()])

        return "\n".join(output_lines) + "\n"
