"""Video record data model (pure Python, no Qt dependency)."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime


def _dt_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str_to_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@dataclass(slots=True)
class VideoRecord:
    """One imported video in the library."""

    video_id: str
    title: str
    file_path: str                       # Locator inside managed storage
    duration_sec: float = 0.0
    file_size: int = 0                   # Bytes
    thumbnail_data: bytes | None = None  # PNG
    date_added: datetime | None = None
    is_favorite: bool = False
    last_position_sec: float = 0.0
    view_count: int = 0
    last_watched: datetime | None = None

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail_data)

    def clamp_position(self, seconds: float) -> float:
        """Clamp a playback position into [0, duration] (no upper bound while duration is 0)."""
        seconds = max(0.0, float(seconds))
        if self.duration_sec > 0:
            seconds = min(seconds, self.duration_sec)
        return seconds

    def to_dict(self) -> dict:
        return {
            "video_id": self.video_id,
            "title": self.title,
            "file_path": self.file_path,
            "duration_sec": self.duration_sec,
            "file_size": self.file_size,
            "thumbnail_data": (
                base64.b64encode(self.thumbnail_data).decode("ascii")
                if self.thumbnail_data
                else None
            ),
            "date_added": _dt_to_str(self.date_added),
            "is_favorite": self.is_favorite,
            "last_position_sec": self.last_position_sec,
            "view_count": self.view_count,
            "last_watched": _dt_to_str(self.last_watched),
        }

    @classmethod
    def from_dict(cls, data: dict) -> VideoRecord:
        thumb = data.get("thumbnail_data")
        return cls(
            video_id=data["video_id"],
            title=data.get("title", ""),
            file_path=data["file_path"],
            duration_sec=float(data.get("duration_sec", 0.0)),
            file_size=int(data.get("file_size", 0)),
            thumbnail_data=base64.b64decode(thumb) if thumb else None,
            date_added=_str_to_dt(data.get("date_added")),
            is_favorite=bool(data.get("is_favorite", False)),
            last_position_sec=float(data.get("last_position_sec", 0.0)),
            view_count=int(data.get("view_count", 0)),
            last_watched=_str_to_dt(data.get("last_watched")),
        )
