"""Filter and sort options for library queries."""

from __future__ import annotations

from enum import Enum


class VideoFilter(Enum):
    ALL = "All Videos"
    FAVORITES = "Favorites"
    RECENTLY_WATCHED = "Recently Watched"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> VideoFilter:
        return cls[name.strip().upper().replace("-", "_")]


class VideoSortOption(Enum):
    """Sort orders offered by the gallery. Value is the display label."""

    DATE_ADDED_NEWEST = "Date Added (Newest)"
    DATE_ADDED_OLDEST = "Date Added (Oldest)"
    TITLE_ASC = "Title (A-Z)"
    TITLE_DESC = "Title (Z-A)"
    DURATION_SHORTEST = "Duration (Shortest)"
    DURATION_LONGEST = "Duration (Longest)"
    SIZE_SMALLEST = "Size (Smallest)"
    SIZE_LARGEST = "Size (Largest)"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> VideoSortOption:
        """Parse 'title-asc' / 'TITLE_ASC' style names."""
        return cls[name.strip().upper().replace("-", "_")]
