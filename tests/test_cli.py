"""Tests for the read-videos command line interface."""

import os

import pytest

from conftest import FakeSummarizer, make_response
from readvideos import cli
from readvideos.core import TranscriptionPipeline
from readvideos.exceptions import TranscriptionAPIError
from readvideos.models import FailurePolicy, MIB, SummaryProvider


@pytest.fixture
def fake_pipeline(monkeypatch, make_pipeline):
    """Route ``TranscriptionPipeline.from_config`` to a pipeline wired to fakes."""
    state = {}

    def install(responses, audio=b"x" * 30):
        pipeline, _, client = make_pipeline(audio=audio, responses=responses, summarizer=FakeSummarizer())

        def from_config(config, settings=None):
            state["config"] = config
            return pipeline

        monkeypatch.setattr(TranscriptionPipeline, "from_config", staticmethod(from_config))
        state["client"] = client
        return state

    return install


def run_cli(*argv) -> int:
    return cli.main(list(argv))


class TestTranscribe:
    def test_success(self, fake_pipeline, data_dir, capsys) -> None:
        state = fake_pipeline([make_response([(0, 5, "Hello.")], 5.0)])

        exit_code = run_cli("transcribe", "videos/talk.mp4", "--data-dir", str(data_dir),
                            "--max-chunk-mb", "1", "--summary-provider", "none")

        assert exit_code == 0
        config = state["config"]
        assert config.max_chunk_size_bytes == MIB
        assert config.failure_policy is FailurePolicy.STRICT
        assert config.summary_provider is SummaryProvider.NONE
        assert config.data_dir == str(data_dir)
        assert "Transcription completed: talk.mp4" in capsys.readouterr().out

    def test_strict_failure_reports_stage_and_chunk(self, fake_pipeline, data_dir, capsys) -> None:
        fake_pipeline([TranscriptionAPIError("HTTP error: 500", status_code=500)])

        exit_code = run_cli("transcribe", "videos/talk.mp4", "--data-dir", str(data_dir))

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "Stage: transcribing" in out
        assert "Chunk: 0" in out

    def test_tolerant_flag(self, fake_pipeline, data_dir, capsys) -> None:
        state = fake_pipeline([TranscriptionAPIError("HTTP error: 500", status_code=500)])

        exit_code = run_cli("transcribe", "videos/talk.mp4", "--tolerant", "--data-dir", str(data_dir))

        assert exit_code == 0
        assert state["config"].failure_policy is FailurePolicy.TOLERANT
        assert "Failed chunks: 0" in capsys.readouterr().out

    def test_several_videos(self, fake_pipeline, data_dir, capsys) -> None:
        fake_pipeline([make_response([(0, 5, "Hi.")], 5.0)] * 2, audio=b"x" * 5)

        exit_code = run_cli("transcribe", "videos/a.mp4", "videos/b.mp4", "--data-dir", str(data_dir))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Transcription completed: a.mp4" in out
        assert "Transcription completed: b.mp4" in out


class TestCatalogCommands:
    @pytest.fixture
    def transcribed(self, fake_pipeline, data_dir, capsys):
        fake_pipeline([make_response([(0, 5, "Catalogued speech.")], 5.0)])
        run_cli("transcribe", "videos/talk.mp4", "--data-dir", str(data_dir))
        capsys.readouterr()
        return cli.VideoCatalog(data_dir).load()[0]

    def test_list(self, transcribed, data_dir, capsys) -> None:
        assert run_cli("list", "--data-dir", str(data_dir)) == 0
        out = capsys.readouterr().out
        assert transcribed.id in out and "talk.mp4" in out

    def test_list_empty(self, data_dir, capsys) -> None:
        assert run_cli("list", "--data-dir", str(data_dir)) == 0
        assert "No transcribed videos" in capsys.readouterr().out

    def test_show(self, transcribed, data_dir, capsys) -> None:
        assert run_cli("show", transcribed.id, "--data-dir", str(data_dir)) == 0
        out = capsys.readouterr().out
        assert "[00:00 - 00:05] Catalogued speech." in out
        assert "SUMMARY" in out

    def test_show_unknown(self, data_dir, capsys) -> None:
        assert run_cli("show", "nope", "--data-dir", str(data_dir)) == 1

    def test_remove(self, transcribed, data_dir, capsys) -> None:
        assert run_cli("remove", transcribed.id, "--data-dir", str(data_dir), "--delete-files") == 0
        assert cli.VideoCatalog(data_dir).load() == []
        assert run_cli("remove", transcribed.id, "--data-dir", str(data_dir)) == 1

    def test_show_with_missing_transcript_file(self, transcribed, data_dir, capsys) -> None:
        os.remove(transcribed.transcript_ref)
        assert run_cli("show", transcribed.id, "--data-dir", str(data_dir)) == 1
        assert "Error:" in capsys.readouterr().out

    def test_show_with_malformed_transcript(self, transcribed, data_dir, capsys) -> None:
        with open(transcribed.transcript_ref, "w", encoding="utf-8") as f:
            f.write('{"segments": [1, 2]}')
        assert run_cli("show", transcribed.id, "--data-dir", str(data_dir)) == 1
        assert "Error:" in capsys.readouterr().out
