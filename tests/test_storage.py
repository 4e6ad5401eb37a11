"""Tests for transcript files and the video catalog."""

import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from readvideos.exceptions import PersistenceError
from readvideos.models import TranscriptRecord, TranscriptSegment, VideoRecord
from readvideos.storage import CATALOG_FILENAME, VideoCatalog
from readvideos.utils import file_utils


@pytest.fixture
def record() -> TranscriptRecord:
    return TranscriptRecord(
        segments=[
            TranscriptSegment(0.0, 12.34, "Welcome to the lecture.", chunk_index=0),
            TranscriptSegment(12.34, 75.5, "Today we cover queues.", chunk_index=0),
            TranscriptSegment(75.5, 75.5, "[Transcription failed for chunk 2: HTTP error: 500]",
                              chunk_index=1, failed=True),
        ],
        summary="A lecture about queues.",
        topics="# Main Topics\n\n## Queues",
    )


class TestTranscriptStorage:
    def test_round_trip(self, storage, record) -> None:
        path = storage.save_transcript(record, storage.get_transcript_path("lecture"))
        assert storage.load_transcript(path) == record

    def test_persisted_layout(self, storage, record) -> None:
        path = storage.save_transcript(record, storage.get_transcript_path("lecture"))
        data = json.loads(path.read_text(encoding="utf-8"))

        assert set(data) == {"segments", "summary", "topics"}
        assert data["segments"][1]["timestamp"] == "00:12 - 01:15"
        assert data["segments"][1]["text"] == "Today we cover queues."
        assert data["segments"][2]["failed"] is True

    def test_legacy_mapping_layout(self, storage, tmp_path) -> None:
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps({
            "segments": {"01:00 - 01:30": "second", "00:00 - 00:30": "first"},
            "summary": "old summary",
            "topics": "old topics",
        }), encoding="utf-8")

        loaded = storage.load_transcript(path)

        assert [segment.text for segment in loaded.segments] == ["first", "second"]
        assert [(segment.start, segment.end) for segment in loaded.segments] == [(0, 30), (60, 90)]
        assert loaded.summary == "old summary"
        assert loaded.topics == "old topics"

    def test_segments_without_exact_times(self, storage, tmp_path) -> None:
        path = tmp_path / "display_only.json"
        path.write_text(json.dumps({
            "segments": [{"timestamp": "00:05 - 00:09", "text": "hi"}],
            "summary": "",
            "topics": "",
        }), encoding="utf-8")

        assert storage.load_transcript(path).segments == [TranscriptSegment(5, 9, "hi")]

    def test_missing_file(self, storage, tmp_path) -> None:
        with pytest.raises(PersistenceError):
            storage.load_transcript(tmp_path / "missing.json")

    @pytest.mark.parametrize("content", ["not json", "[1, 2, 3]"])
    def test_invalid_content(self, storage, tmp_path, content) -> None:
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(PersistenceError):
            storage.load_transcript(path)

    @pytest.mark.parametrize("content", [
        '{"segments": [1, 2]}',
        '{"segments": [{"start": "abc", "end": 1, "text": "x"}]}',
        '{"segments": "not a list"}',
    ])
    def test_malformed_segments(self, storage, tmp_path, content) -> None:
        path = tmp_path / "malformed.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(PersistenceError) as exc_info:
            storage.load_transcript(path)
        assert exc_info.value.__cause__ is not None

    def test_no_temp_files_left(self, storage, record) -> None:
        path = storage.save_transcript(record, storage.get_transcript_path("lecture"))
        assert [p.name for p in storage.transcripts_dir.iterdir()] == [path.name]

    def test_failed_write_keeps_previous_file(self, storage, record, monkeypatch) -> None:
        path = storage.get_transcript_path("lecture")
        storage.save_transcript(TranscriptRecord(segments=[]), path)
        before = path.read_text(encoding="utf-8")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(file_utils.os, "replace", fail_replace)

        with pytest.raises(PersistenceError):
            storage.save_transcript(record, path)
        assert path.read_text(encoding="utf-8") == before
        assert [p.name for p in storage.transcripts_dir.iterdir()] == [path.name]

    def test_transcript_path(self, storage) -> None:
        path = storage.get_transcript_path("my:video", run_id="run_1")
        assert path.parent == storage.transcripts_dir
        assert path.name == "my_video_run_1_transcript.json"

    def test_delete_transcript(self, storage, record) -> None:
        path = storage.save_transcript(record, storage.get_transcript_path("lecture"))
        storage.save_transcript_text("text", path.with_suffix(".txt"))

        assert storage.delete_transcript(path) is True
        assert not path.exists()
        assert not path.with_suffix(".txt").exists()
        assert storage.delete_transcript(path) is False


def make_video(name: str) -> VideoRecord:
    return VideoRecord.create(video_ref=f"videos/{name}", transcript_ref=f"data/transcripts/{name}.json")


class TestVideoCatalog:
    def test_empty_catalog(self, catalog) -> None:
        assert catalog.load() == []
        assert catalog.count() == 0

    def test_append_is_most_recent_first(self, catalog) -> None:
        first, second = make_video("a.mp4"), make_video("b.mp4")
        catalog.append(first)
        catalog.append(second)
        assert catalog.load() == [second, first]

    def test_append_same_id_replaces(self, catalog) -> None:
        video = make_video("a.mp4")
        catalog.append(video)
        catalog.append(make_video("b.mp4"))
        catalog.append(video)
        assert [record.file_name for record in catalog.load()] == ["a.mp4", "b.mp4"]

    def test_persisted_layout(self, catalog) -> None:
        video = catalog.append(make_video("a.mp4"))
        data = json.loads(catalog.catalog_path.read_text(encoding="utf-8"))

        assert catalog.catalog_path.name == CATALOG_FILENAME
        assert data == [{
            "id": video.id,
            "videoRef": "videos/a.mp4",
            "transcriptRef": "data/transcripts/a.mp4.json",
            "fileName": "a.mp4",
            "createdAt": video.created_at,
        }]

    def test_legacy_keys(self, catalog) -> None:
        catalog.catalog_path.write_text(json.dumps([{
            "id": "1", "videoURL": "videos/old.mov", "transcriptionURL": "t.json", "createdAt": "2024-01-01T00:00:00",
        }]), encoding="utf-8")

        record = catalog.find_by_id("1")
        assert record.video_ref == "videos/old.mov"
        assert record.transcript_ref == "t.json"
        assert record.file_name == "old.mov"

    def test_find_by_id(self, catalog) -> None:
        video = catalog.append(make_video("a.mp4"))
        assert catalog.find_by_id(video.id) == video
        assert catalog.find_by_id("missing") is None

    def test_remove(self, catalog) -> None:
        first, second = catalog.append(make_video("a.mp4")), catalog.append(make_video("b.mp4"))

        assert catalog.remove(first.id) == first
        assert catalog.load() == [second]
        assert catalog.remove(first.id) is None

    def test_remove_with_files(self, catalog, tmp_path) -> None:
        video_path = tmp_path / "clip.mp4"
        transcript_path = tmp_path / "clip_transcript.json"
        for path in (video_path, transcript_path, transcript_path.with_suffix(".txt")):
            path.write_text("x")
        video = catalog.append(VideoRecord.create(str(video_path), str(transcript_path)))

        catalog.remove(video.id, delete_files=True)

        assert not video_path.exists()
        assert not transcript_path.exists()
        assert not transcript_path.with_suffix(".txt").exists()

    def test_remove_keeps_files_by_default(self, catalog, tmp_path) -> None:
        video_path = tmp_path / "clip.mp4"
        video_path.write_text("x")
        video = catalog.append(VideoRecord.create(str(video_path), str(tmp_path / "t.json")))

        catalog.remove(video.id)

        assert video_path.exists()

    def test_corrupt_catalog(self, catalog) -> None:
        catalog.catalog_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError):
            catalog.load()

    def test_catalog_must_be_a_list(self, catalog) -> None:
        catalog.catalog_path.write_text("{}", encoding="utf-8")
        with pytest.raises(PersistenceError):
            catalog.append(make_video("a.mp4"))

    def test_concurrent_appends_are_not_lost(self, data_dir) -> None:
        start = threading.Barrier(8)

        def add(i: int) -> None:
            start.wait()
            VideoCatalog(data_dir).append(make_video(f"video_{i}.mp4"))

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(add, range(8)))

        records = VideoCatalog(data_dir).load()
        assert sorted(record.file_name for record in records) == sorted(f"video_{i}.mp4" for i in range(8))


class TestRemoveFileQuietly:
    def test_missing_file(self, tmp_path) -> None:
        assert file_utils.remove_file_quietly(tmp_path / "missing.m4a") is False

    def test_permission_error_is_logged(self, tmp_path, monkeypatch, caplog) -> None:
        path = tmp_path / "locked.m4a"
        path.write_bytes(b"x")

        def deny(self, *args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr(file_utils.Path, "unlink", deny)

        assert file_utils.remove_file_quietly(path) is False
        assert path.exists()
        assert "Could not remove" in caplog.text
