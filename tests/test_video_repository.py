"""Tests for the JSON-backed VideoRepository."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from lm_player.models.video_record import VideoRecord
from lm_player.services.video_repository import PersistenceError, VideoRepository

T0 = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _record(video_id: str, minutes: int | None = 0, **kwargs) -> VideoRecord:
    return VideoRecord(
        video_id=video_id,
        title=kwargs.pop("title", video_id),
        file_path=f"/tmp/videos/{video_id}.mp4",
        date_added=None if minutes is None else T0 + timedelta(minutes=minutes),
        **kwargs,
    )


class TestVideoRepository:
    def test_missing_file_starts_empty(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        assert repo.count() == 0
        assert repo.fetch_all() == []

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "videos.json"
        repo = VideoRepository(path)
        repo.insert(_record("a", title="Alpha", view_count=2, is_favorite=True))
        repo.save()

        again = VideoRepository(path)
        r = again.get("a")
        assert r is not None
        assert r.title == "Alpha"
        assert r.view_count == 2
        assert r.is_favorite is True

    def test_file_schema(self, tmp_path):
        path = tmp_path / "videos.json"
        repo = VideoRepository(path)
        repo.insert(_record("a"))
        repo.save()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert [v["video_id"] for v in data["videos"]] == ["a"]

    def test_save_leaves_no_temp_file(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        repo.insert(_record("a"))
        repo.save()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["videos.json"]

    def test_save_creates_parent_dir(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "videos.json"
        repo = VideoRepository(path)
        repo.insert(_record("a"))
        repo.save()
        assert path.exists()

    def test_failed_save_raises_and_keeps_old_file(self, tmp_path):
        path = tmp_path / "videos.json"
        repo = VideoRepository(path)
        repo.insert(_record("a"))
        repo.save()
        before = path.read_text(encoding="utf-8")

        repo.insert(_record("b"))
        with patch("lm_player.services.video_repository.os.replace", side_effect=OSError("ro")):
            with pytest.raises(PersistenceError):
                repo.save()
        assert path.read_text(encoding="utf-8") == before
        assert not path.with_suffix(".tmp").exists()

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "videos.json"
        path.write_text("{not json", encoding="utf-8")
        assert VideoRepository(path).count() == 0

    def test_malformed_entry_skipped(self, tmp_path):
        path = tmp_path / "videos.json"
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "videos": [
                        {"title": "no id"},
                        {"video_id": "ok", "title": "OK", "file_path": "/tmp/ok.mp4"},
                    ],
                }
            ),
            encoding="utf-8",
        )
        repo = VideoRepository(path)
        assert repo.count() == 1
        assert repo.contains("ok")

    @pytest.mark.parametrize("content", ["[]", '"text"', '{"videos": {"a": 1}}', "null"])
    def test_wrong_layout_starts_empty(self, tmp_path, content):
        path = tmp_path / "videos.json"
        path.write_text(content, encoding="utf-8")
        assert VideoRepository(path).count() == 0

    def test_non_dict_entries_skipped(self, tmp_path):
        path = tmp_path / "videos.json"
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "videos": [
                        "oops",
                        42,
                        {"video_id": "ok", "title": "OK", "file_path": "/tmp/ok.mp4"},
                    ],
                }
            ),
            encoding="utf-8",
        )
        repo = VideoRepository(path)
        assert [r.video_id for r in repo.fetch_all()] == ["ok"]

    def test_fetch_all_newest_first_missing_date_last(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        repo.insert(_record("old", 0))
        repo.insert(_record("undated", None))
        repo.insert(_record("new", 30))
        repo.insert(_record("mid", 10))
        assert [r.video_id for r in repo.fetch_all()] == ["new", "mid", "old", "undated"]

    def test_insert_duplicate_rejected(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        repo.insert(_record("a"))
        with pytest.raises(ValueError):
            repo.insert(_record("a"))

    def test_update_unknown_raises(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        with pytest.raises(KeyError):
            repo.update(_record("ghost"))

    def test_delete(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        repo.insert(_record("a"))
        removed = repo.delete("a")
        assert removed is not None and removed.video_id == "a"
        assert repo.delete("a") is None
        assert repo.count() == 0

    def test_get_and_fetch_all_return_copies(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        original = _record("a", title="Alpha")
        repo.insert(original)
        original.title = "changed after insert"

        repo.get("a").title = "changed via get"
        repo.fetch_all()[0].view_count = 5

        stored = repo.get("a")
        assert stored.title == "Alpha"
        assert stored.view_count == 0

    def test_update_takes_effect(self, tmp_path):
        repo = VideoRepository(tmp_path / "videos.json")
        repo.insert(_record("a"))
        record = repo.get("a")
        record.view_count = 3
        repo.update(record)
        assert repo.get("a").view_count == 3

    def test_load_discards_unsaved_changes(self, tmp_path):
        path = tmp_path / "videos.json"
        repo = VideoRepository(path)
        repo.insert(_record("a"))
        repo.save()
        repo.insert(_record("b"))
        repo.load()
        assert [r.video_id for r in repo.fetch_all()] == ["a"]
