#!/usr/bin/env python3
"""
Command line interface for read-videos.

Transcribes videos and manages the video catalog:

    read-videos transcribe talk.mp4 --tolerant
    read-videos list
    read-videos show <id>
    read-videos remove <id> --delete-files
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .exceptions import PipelineCancelledError, PipelineFailedError, ReadVideosError
from .models import MIB, FailurePolicy, PipelineResults, SummaryProvider, TranscriptionConfig
from .core import ParallelProcessor, TranscriptFormatter, TranscriptionPipeline
from .storage import TranscriptStorage, VideoCatalog

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--data-dir', type=str, default='data',
                        help='Directory for transcripts and the catalog (default: data)')
    common.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    parser = argparse.ArgumentParser(prog='read-videos', description='Video transcription pipeline')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', required=True)

    transcribe = subparsers.add_parser('transcribe', parents=[common], help='Transcribe one or more videos')
    transcribe.add_argument('videos', nargs='+', metavar='VIDEO', help='Video file path(s)')
    transcribe.add_argument('--max-chunk-mb', type=float, default=25.0,
                            help='Maximum audio chunk size in MiB (default: 25)')
    transcribe.add_argument('--tolerant', action='store_true',
                            help='Keep going when a chunk fails, leaving a placeholder in the transcript')
    transcribe.add_argument('--summary-provider', choices=[p.value for p in SummaryProvider],
                            default=SummaryProvider.GEMINI.value,
                            help='Backend for summary and topics (default: gemini)')
    transcribe.add_argument('--summary-model', type=str, default=None, help='Summary model override')
    transcribe.add_argument('--model', type=str, default='distil-whisper-large-v3-en',
                            help='Speech-to-text model (default: distil-whisper-large-v3-en)')
    transcribe.add_argument('--language', type=str, default=None, help='Spoken language hint, e.g. en')
    transcribe.add_argument('--keep-audio', action='store_true', help='Keep the extracted audio file')
    transcribe.add_argument('--max-workers', type=int, default=2,
                            help='Videos processed at once when several are given (default: 2)')

    subparsers.add_parser('list', parents=[common], help='List transcribed videos, most recent first')

    show = subparsers.add_parser('show', parents=[common], help='Print the transcript of a video')
    show.add_argument('video_id', metavar='ID')

    remove = subparsers.add_parser('remove', parents=[common], help='Remove a video from the catalog')
    remove.add_argument('video_id', metavar='ID')
    remove.add_argument('--delete-files', action='store_true',
                        help='Also delete the video and transcript files')
    return parser


def _print_results(results: PipelineResults) -> None:
    print(f"\nTranscription completed: {results.video_record.file_name}")
    print(f"Video ID: {results.video_record.id}")
    print(f"Run ID: {results.run_id}")
    print(f"Chunks: {results.num_chunks}")
    print(f"Segments: {len(results.transcript.segments)}")
    print(f"Transcript: {results.transcript_path}")
    print(f"Total runtime: {results.total_runtime_seconds:.2f} seconds")
    if results.failed_chunks:
        print(f"Failed chunks: {', '.join(str(i) for i in results.failed_chunks)}")
    if results.summary_error:
        print(f"Summary unavailable: {results.summary_error}")
    if results.topics_error:
        print(f"Topics unavailable: {results.topics_error}")


def _print_failure(video: str, error: ReadVideosError) -> None:
    print(f"\nTranscription failed: {video}")
    if isinstance(error, PipelineFailedError):
        print(f"Stage: {error.stage}")
        if error.chunk_index is not None:
            print(f"Chunk: {error.chunk_index}")
        print(f"Reason: {error.reason}")
    else:
        print(f"Error: {error}")


def cmd_transcribe(args) -> int:
    configs = [
        TranscriptionConfig(
            video_input=video,
            max_chunk_size_bytes=int(args.max_chunk_mb * MIB),
            failure_policy=FailurePolicy.TOLERANT if args.tolerant else FailurePolicy.STRICT,
            transcription_model=args.model,
            language=args.language,
            summary_provider=args.summary_provider,
            summary_model=args.summary_model,
            data_dir=args.data_dir,
            cleanup_audio=not args.keep_audio,
        )
        for video in args.videos
    ]
    pipeline = TranscriptionPipeline.from_config(configs[0])

    if len(configs) == 1:
        try:
            _print_results(pipeline.process_video(configs[0]))
        except (PipelineFailedError, PipelineCancelledError) as e:
            _print_failure(configs[0].video_input, e)
            return 1
        return 0

    outcomes = ParallelProcessor(max_workers=args.max_workers).process_videos(pipeline.process_video, configs)
    for outcome in outcomes:
        if outcome.success:
            _print_results(outcome.results)
        else:
            _print_failure(outcome.config.video_input, outcome.error)
    return 0 if all(outcome.success for outcome in outcomes) else 1


def cmd_list(args) -> int:
    records = VideoCatalog(args.data_dir).load()
    if not records:
        print("No transcribed videos")
        return 0
    for record in records:
        print(f"{record.id}  {record.created_at}  {record.file_name}")
    return 0


def cmd_show(args) -> int:
    record = VideoCatalog(args.data_dir).find_by_id(args.video_id)
    if record is None:
        print(f"Video not found: {args.video_id}")
        return 1
    transcript = TranscriptStorage(args.data_dir).load_transcript(record.transcript_ref)
    print(TranscriptFormatter().to_readable_text(transcript, record.file_name))
    return 0


def cmd_remove(args) -> int:
    removed = VideoCatalog(args.data_dir).remove(args.video_id, delete_files=args.delete_files)
    if removed is None:
        print(f"Video not found: {args.video_id}")
        return 1
    print(f"Removed {removed.file_name} ({removed.id})")
    return 0


COMMANDS = {
    'transcribe': cmd_transcribe,
    'list': cmd_list,
    'show': cmd_show,
    'remove': cmd_remove,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the command line interface."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return COMMANDS[args.command](args)
    except ReadVideosError as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
