"""Filtering, sorting and search over a snapshot of the library."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable

from lm_player.models.library_query import VideoFilter, VideoSortOption
from lm_player.models.video_record import VideoRecord
from lm_player.utils.config import RECENTLY_WATCHED_LIMIT

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return _EARLIEST
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# option -> (key, descending)
_SORT_KEYS: dict[VideoSortOption, tuple[Callable[[VideoRecord], object], bool]] = {
    VideoSortOption.DATE_ADDED_NEWEST: (lambda r: _as_utc(r.date_added), True),
    VideoSortOption.DATE_ADDED_OLDEST: (lambda r: _as_utc(r.date_added), False),
    VideoSortOption.TITLE_ASC: (lambda r: r.title or "", False),
    VideoSortOption.TITLE_DESC: (lambda r: r.title or "", True),
    VideoSortOption.DURATION_SHORTEST: (lambda r: r.duration_sec or 0.0, False),
    VideoSortOption.DURATION_LONGEST: (lambda r: r.duration_sec or 0.0, True),
    VideoSortOption.SIZE_SMALLEST: (lambda r: r.file_size or 0, False),
    VideoSortOption.SIZE_LARGEST: (lambda r: r.file_size or 0, True),
}


def filter_videos(
    videos: Iterable[VideoRecord],
    video_filter: VideoFilter,
    recent_limit: int = RECENTLY_WATCHED_LIMIT,
) -> list[VideoRecord]:
    if video_filter is VideoFilter.FAVORITES:
        return [v for v in videos if v.is_favorite]
    if video_filter is VideoFilter.RECENTLY_WATCHED:
        watched = [v for v in videos if v.last_watched is not None]
        watched.sort(key=lambda v: _as_utc(v.last_watched), reverse=True)
        return watched[:max(recent_limit, 0)]
    return list(videos)


def sort_videos(videos: Iterable[VideoRecord], option: VideoSortOption) -> list[VideoRecord]:
    key, descending = _SORT_KEYS[option]
    return sorted(videos, key=key, reverse=descending)


def search_videos(videos: Iterable[VideoRecord], text: str) -> list[VideoRecord]:
    """Case-insensitive substring match on title. Empty text matches all."""
    needle = (text or "").strip().casefold()
    if not needle:
        return list(videos)
    return [v for v in videos if needle in (v.title or "").casefold()]


def query_videos(
    videos: Iterable[VideoRecord],
    video_filter: VideoFilter = VideoFilter.ALL,
    sort: VideoSortOption = VideoSortOption.DATE_ADDED_NEWEST,
    search_text: str = "",
    recent_limit: int = RECENTLY_WATCHED_LIMIT,
) -> list[VideoRecord]:
    """Filter, then sort, then narrow by search text.

    The recently-watched cap is applied before the search, so a search only
    looks inside the capped set.
    """
    result = filter_videos(videos, video_filter, recent_limit)
    result = sort_videos(result, sort)
    return search_videos(result, search_text)
