"""Shared fixtures and in-memory fakes for the pipeline's external services."""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from readvideos.core import TranscriptionPipeline, TranscriptValidator
from readvideos.exceptions import SummarizationError
from readvideos.models import SummaryTask, TranscriptionConfig, TranscriptionResponse, TranscriptSegment
from readvideos.storage import TranscriptStorage, VideoCatalog


def make_response(spans: Sequence[Tuple[float, float, str]], duration: Optional[float] = None) -> TranscriptionResponse:
    """Build a service response from (start, end, text) tuples in chunk-local time."""
    segments = [TranscriptSegment(start=start, end=end, text=text) for start, end, text in spans]
    return TranscriptionResponse(
        text=" ".join(text for _, _, text in spans),
        segments=segments,
        language="english",
        duration=duration,
    )


class FakeExtractor:
    """Writes a fixed audio payload to disk instead of running ffmpeg."""

    def __init__(self, audio: bytes, output_dir: Path, error: Optional[Exception] = None):
        self.audio = audio
        self.output_dir = output_dir
        self.error = error
        self.calls: List[str] = []

    def extract(self, video_path) -> Path:
        self.calls.append(str(video_path))
        if self.error is not None:
            raise self.error
        audio_path = self.output_dir / f"{Path(video_path).stem}.m4a"
        audio_path.write_bytes(self.audio)
        return audio_path


class FakeTranscriptionClient:
    """Returns scripted responses in call order; scripted exceptions are raised."""

    def __init__(self, responses: Sequence):
        self.responses = list(responses)
        self.calls: List[dict] = []

    def transcribe(self, audio: bytes, *, model: str, response_format: str = "verbose_json", language=None):
        self.calls.append({
            'size': len(audio),
            'model': model,
            'response_format': response_format,
            'language': language,
        })
        response = self.responses[len(self.calls) - 1]
        if isinstance(response, Exception):
            raise response
        return response


class FakeSummarizer:
    """Returns fixed markdown per task; tasks listed in ``fail_tasks`` raise."""

    def __init__(self, summary: str = "A summary.\n\n## Comments\n\n- Insightful",
                 topics: str = "# Main Topics\n\n## Intro",
                 fail_tasks: Sequence[SummaryTask] = ()):
        self.outputs = {SummaryTask.SUMMARY: summary, SummaryTask.TOPICS: topics}
        self.fail_tasks = set(fail_tasks)
        self.calls: List[Tuple[SummaryTask, str]] = []

    def summarize(self, text: str, task: SummaryTask) -> str:
        self.calls.append((task, text))
        if task in self.fail_tasks:
            raise SummarizationError(f"{task.value} service unavailable", task=task.value)
        return self.outputs[task]


@pytest.fixture
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def audio_dir(tmp_path) -> Path:
    path = tmp_path / "audio"
    path.mkdir()
    return path


@pytest.fixture
def storage(data_dir) -> TranscriptStorage:
    return TranscriptStorage(data_dir)


@pytest.fixture
def catalog(data_dir) -> VideoCatalog:
    return VideoCatalog(data_dir)


@pytest.fixture
def make_pipeline(storage, catalog, audio_dir):
    """Factory for a pipeline wired to fakes."""

    def _make(audio: bytes = b"", responses: Sequence = (), summarizer=None,
              extraction_error: Optional[Exception] = None, catalog_override=None):
        extractor = FakeExtractor(audio, audio_dir, error=extraction_error)
        client = FakeTranscriptionClient(responses)
        pipeline = TranscriptionPipeline(
            extractor=extractor,
            transcription_client=client,
            transcript_storage=storage,
            catalog=catalog_override or catalog,
            summarizer=summarizer,
            validator=TranscriptValidator(),
        )
        return pipeline, extractor, client

    return _make


@pytest.fixture
def make_config(data_dir):
    def _make(video_input: str = "videos/lecture.mp4", **overrides) -> TranscriptionConfig:
        return TranscriptionConfig(video_input=video_input, data_dir=str(data_dir), **overrides)

    return _make
