"""JSON-backed persistence for video records."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from lm_player.models.video_record import VideoRecord
from lm_player.utils.config import LIBRARY_FILE_NAME, get_app_dir

logger = logging.getLogger(__name__)

LIBRARY_VERSION = 1

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class PersistenceError(Exception):
    """The library file could not be written."""


def default_library_path() -> Path:
    return get_app_dir() / LIBRARY_FILE_NAME


def _added_key(record: VideoRecord) -> datetime:
    """Sort key treating a missing date as the oldest possible."""
    value = record.date_added
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class VideoRepository:
    """
    Record store at <app dir>/videos.json.

    Schema:
    {
      "version": 1,
      "videos": [ { ...VideoRecord fields... }, ... ]
    }

    insert/update/delete only touch memory; save() commits everything at once
    by writing a temp file and renaming it over the old one.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_library_path()
        self._records: dict[str, VideoRecord] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------ Persistence

    def load(self) -> None:
        """(Re)read the file. A missing or corrupt file yields an empty store."""
        self._records = {}
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Library file %s unreadable, starting empty: %s", self._path, e)
            return

        videos = data.get("videos", []) if isinstance(data, dict) else None
        if not isinstance(videos, list):
            logger.warning("Library file %s has an unexpected layout, starting empty", self._path)
            return

        for entry in videos:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed library entry: %r", entry)
                continue
            try:
                record = VideoRecord.from_dict(entry)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed library entry: %s", e)
                continue
            self._records[record.video_id] = record

    def save(self) -> None:
        """Atomically write all records. Raises PersistenceError on failure."""
        data = {
            "version": LIBRARY_VERSION,
            "videos": [r.to_dict() for r in self.fetch_all()],
        }
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp_path, self._path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not save library to {self._path}: {e}") from e

    # ------------------------------------------------------------------ CRUD

    def fetch_all(self) -> list[VideoRecord]:
        """Copies of all records, newest first by date added."""
        records = sorted(self._records.values(), key=_added_key, reverse=True)
        return [replace(r) for r in records]

    def get(self, video_id: str) -> VideoRecord | None:
        """A copy of the record; changes only take effect through update()."""
        record = self._records.get(video_id)
        return replace(record) if record is not None else None

    def contains(self, video_id: str) -> bool:
        return video_id in self._records

    def insert(self, record: VideoRecord) -> None:
        if record.video_id in self._records:
            raise ValueError(f"Duplicate video id: {record.video_id}")
        self._records[record.video_id] = replace(record)

    def update(self, record: VideoRecord) -> None:
        if record.video_id not in self._records:
            raise KeyError(record.video_id)
        self._records[record.video_id] = replace(record)

    def delete(self, video_id: str) -> VideoRecord | None:
        return self._records.pop(video_id, None)

    def count(self) -> int:
        return len(self._records)
