#!/usr/bin/env python3
"""
Audio extraction for the transcription pipeline.

This module turns a video file into a single-track AAC audio file (``.m4a``)
that can be chunked and sent to the speech-to-text service.
"""

import logging
import os
import subprocess
import tempfile
import uuid
from pathlib import Path
from typing import Optional, Tuple, Union

from moviepy import VideoFileClip

from ..exceptions import ExtractionError

logger = logging.getLogger(__name__)

SUPPORTED_VIDEO_EXTENSIONS = {'.mp4', '.mov', '.avi', '.mkv', '.webm', '.m4v'}


def validate_video_file(video_path: Union[str, Path]) -> Tuple[bool, str]:
    """
    Validate that a video file exists and has a supported extension.

    Args:
        video_path: Path to the video file

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not os.path.exists(video_path):
        return False, f"File not found: {video_path}"

    if not os.path.isfile(video_path):
        return False, f"Path is not a file: {video_path}"

    file_ext = Path(video_path).suffix.lower()
    if file_ext not in SUPPORTED_VIDEO_EXTENSIONS:
        return False, f"Unsupported file format: {file_ext}"

    return True, ""


class FFmpegAudioExtractor:
    """
    Extracts the audio track of a video with ffmpeg, falling back to MoviePy.
    """

    def __init__(self, output_dir: Optional[Union[str, Path]] = None, bitrate: str = "128k"):
        """
        Initialize the audio extractor.

        Args:
            output_dir: Where extracted audio is written; a system temp dir by default
            bitrate: AAC bitrate passed to the encoder
        """
        self.output_dir = Path(output_dir) if output_dir else Path(tempfile.gettempdir())
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.bitrate = bitrate

    def extract(self, video_path: Union[str, Path]) -> Path:
        """
        Extract audio from a video file.

        Args:
            video_path: Path to the source video

        Returns:
            Path to the extracted ``.m4a`` file

        Raises:
            ExtractionError: If the video is invalid or neither ffmpeg nor
                MoviePy can produce the audio
        """
        is_valid, error_msg = validate_video_file(video_path)
        if not is_valid:
            raise ExtractionError(f"Invalid video file: {error_msg}")

        output_path = self.output_dir / f"{uuid.uuid4()}.m4a"
        logger.info("Extracting audio from %s", video_path)

        ffmpeg_error = self._extract_with_ffmpeg(video_path, output_path)
        if ffmpeg_error is None:
            return output_path

        logger.warning("ffmpeg failed for %s: %s. Falling back to MoviePy", video_path, ffmpeg_error)
        try:
            self._extract_with_moviepy(video_path, output_path)
        except (OSError, ValueError, AttributeError) as e:
            if output_path.exists():
                output_path.unlink()
            raise ExtractionError(f"Audio extraction failed for {video_path}: {ffmpeg_error}; MoviePy: {e}") from e
        return output_path

    def _extract_with_ffmpeg(self, video_path: Union[str, Path], output_path: Path) -> Optional[str]:
        """Run ffmpeg. Returns None on success or an error description."""
        cmd = [
            'ffmpeg', '-y',
            '-i', str(video_path),
            '-vn',  # Drop video streams
            '-acodec', 'aac',
            '-b:a', self.bitrate,
            str(output_path),
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            return "ffmpeg not found in PATH"

        if result.returncode != 0:
            return result.stderr.strip().splitlines()[-1] if result.stderr.strip() else f"exit code {result.returncode}"
        if not output_path.exists() or output_path.stat().st_size == 0:
            return "ffmpeg produced no audio"

        logger.info("Extracted audio with ffmpeg: %s", output_path)
        return None

    def _extract_with_moviepy(self, video_path: Union[str, Path], output_path: Path) -> None:
        with VideoFileClip(str(video_path)) as video:
            if video.audio is None:
                raise ValueError("video has no audio track")
            video.audio.write_audiofile(str(output_path), codec='aac', bitrate=self.bitrate, logger=None)
        logger.info("Extracted audio with MoviePy: %s", output_path)
