"""Tests for the transcript store and its backing storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from tubetutor.transcripts.models import TranscriptEntry, TranscriptSource
from tubetutor.transcripts.storage import FileStorage, MemoryStorage
from tubetutor.transcripts.store import DEFAULT_STORAGE_KEY, TranscriptStore


def make_entry(video_id: str = "abc123", text: str = "Hello world") -> TranscriptEntry:
    return TranscriptEntry(
        video_id=video_id,
        transcript=text,
        source=TranscriptSource.PRIMARY,
        fetched_at="2024-05-01T12:00:00.000Z",
    )


class BrokenStorage(MemoryStorage):
    """Reads work, writes fail as if the disk were full."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError(28, "No space left on device")


# ---------------------------------------------------------------------------
# TranscriptEntry
# ---------------------------------------------------------------------------


class TestTranscriptEntry:
    def test_to_dict_uses_camel_case(self) -> None:
        assert make_entry().to_dict() == {
            "videoId": "abc123",
            "transcript": "Hello world",
            "fetchedAt": "2024-05-01T12:00:00.000Z",
            "source": "primary",
        }

    def test_from_dict_inverts_to_dict(self) -> None:
        entry = make_entry()
        assert TranscriptEntry.from_dict(entry.to_dict()) == entry

    def test_from_dict_rejects_unknown_source(self) -> None:
        data = make_entry().to_dict() | {"source": "somewhere-else"}
        with pytest.raises(ValueError):
            TranscriptEntry.from_dict(data)

    def test_from_dict_rejects_missing_field(self) -> None:
        data = make_entry().to_dict()
        del data["fetchedAt"]
        with pytest.raises(KeyError):
            TranscriptEntry.from_dict(data)

    def test_entry_is_immutable(self) -> None:
        entry = make_entry()
        with pytest.raises(AttributeError):
            entry.transcript = "changed"  # type: ignore[misc]

    def test_default_timestamp_is_iso_utc(self) -> None:
        entry = TranscriptEntry(video_id="x", transcript="t", source=TranscriptSource.ALTERNATE)
        assert entry.fetched_at.endswith("Z")
        assert "T" in entry.fetched_at


# ---------------------------------------------------------------------------
# TranscriptStore operations
# ---------------------------------------------------------------------------


class TestTranscriptStore:
    def test_get_unknown_returns_none(self, store: TranscriptStore) -> None:
        assert store.get("missing") is None

    def test_put_then_get_round_trip(self, store: TranscriptStore) -> None:
        entry = make_entry()
        store.put(entry)
        assert store.get("abc123") == entry

    def test_put_replaces_existing_entry(self, store: TranscriptStore) -> None:
        store.put(make_entry(text="old"))
        store.put(make_entry(text="new"))
        assert store.get("abc123").transcript == "new"  # type: ignore[union-attr]
        assert len(store) == 1

    def test_get_all_returns_every_entry(self, store: TranscriptStore) -> None:
        store.put(make_entry("a"))
        store.put(make_entry("b"))
        assert sorted(e.video_id for e in store.get_all()) == ["a", "b"]

    def test_remove_then_get_is_absent(self, store: TranscriptStore) -> None:
        store.put(make_entry())
        store.remove("abc123")
        assert store.get("abc123") is None
        assert "abc123" not in store

    def test_remove_absent_key_is_noop(self, store: TranscriptStore) -> None:
        store.put(make_entry("kept"))
        store.remove("never-stored")
        assert len(store) == 1

    def test_clear_then_get_all_is_empty(self, store: TranscriptStore) -> None:
        store.put(make_entry("a"))
        store.put(make_entry("b"))
        store.clear()
        assert store.get_all() == []


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestPersistence:
    def test_blob_layout_is_keyed_by_video_id(self) -> None:
        storage = MemoryStorage()
        TranscriptStore(storage).put(make_entry())
        blob = json.loads(storage.get_item(DEFAULT_STORAGE_KEY) or "")
        assert blob == {"abc123": make_entry().to_dict()}

    def test_new_store_loads_saved_entries(self) -> None:
        storage = MemoryStorage()
        TranscriptStore(storage).put(make_entry())
        assert TranscriptStore(storage).get("abc123") == make_entry()

    def test_remove_and_clear_are_persisted(self) -> None:
        storage = MemoryStorage()
        first = TranscriptStore(storage)
        first.put(make_entry("a"))
        first.put(make_entry("b"))
        first.remove("a")
        assert [e.video_id for e in TranscriptStore(storage).get_all()] == ["b"]
        first.clear()
        assert TranscriptStore(storage).get_all() == []

    def test_unparseable_blob_loads_as_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        storage = MemoryStorage()
        storage.set_item(DEFAULT_STORAGE_KEY, "{not json")
        with caplog.at_level(logging.WARNING):
            store = TranscriptStore(storage)
        assert store.get_all() == []
        assert "unreadable" in caplog.text

    @pytest.mark.parametrize(
        "blob",
        [
            '["a", "b"]',
            '{"abc123": {"videoId": "abc123"}}',
            '{"abc123": "just text"}',
            json.dumps({"other": make_entry("real").to_dict()}),
        ],
    )
    def test_incompatible_shape_loads_as_empty(self, blob: str) -> None:
        storage = MemoryStorage()
        storage.set_item(DEFAULT_STORAGE_KEY, blob)
        assert TranscriptStore(storage).get_all() == []

    def test_write_failure_keeps_in_memory_view(self, caplog: pytest.LogCaptureFixture) -> None:
        store = TranscriptStore(BrokenStorage())
        with caplog.at_level(logging.ERROR):
            store.put(make_entry())
        assert store.get("abc123") == make_entry()
        assert "Could not persist" in caplog.text

    def test_custom_key(self) -> None:
        storage = MemoryStorage()
        TranscriptStore(storage, key="other").put(make_entry())
        assert storage.get_item(DEFAULT_STORAGE_KEY) is None
        assert storage.get_item("other") is not None


class TestFileStorage:
    def test_missing_key_reads_none(self, tmp_path: Path) -> None:
        assert FileStorage(tmp_path / "store").get_item("nothing") is None

    def test_write_creates_directory_and_file(self, tmp_path: Path) -> None:
        storage = FileStorage(tmp_path / "nested" / "store")
        storage.set_item("youtube_transcripts", '{"a": 1}')
        path = tmp_path / "nested" / "store" / "youtube_transcripts.json"
        assert path.read_text(encoding="utf-8") == '{"a": 1}'
        assert storage.get_item("youtube_transcripts") == '{"a": 1}'

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        storage = FileStorage(tmp_path)
        storage.set_item("k", "one")
        storage.set_item("k", "two")
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_remove_item_is_idempotent(self, tmp_path: Path) -> None:
        storage = FileStorage(tmp_path)
        storage.set_item("k", "v")
        storage.remove_item("k")
        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_store_survives_restart_on_disk(self, tmp_path: Path) -> None:
        TranscriptStore(FileStorage(tmp_path)).put(make_entry())
        assert TranscriptStore(FileStorage(tmp_path)).get("abc123") == make_entry()

    def test_non_utf8_file_loads_as_empty(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / f"{DEFAULT_STORAGE_KEY}.json").write_bytes(b"\xff\xfe{garbage")
        with caplog.at_level(logging.WARNING):
            store = TranscriptStore(FileStorage(tmp_path))
        assert store.get_all() == []
        assert "unreadable" in caplog.text
        store.put(make_entry())
        assert TranscriptStore(FileStorage(tmp_path)).get("abc123") == make_entry()
