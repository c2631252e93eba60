"""Display formatting for durations, file sizes and dates."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache


@lru_cache(maxsize=4096)
def format_duration(seconds: float) -> str:
    """Format seconds as 'M:SS', or 'H:MM:SS' for an hour or more."""
    if seconds != seconds or seconds < 0:  # NaN or negative
        seconds = 0
    total = int(seconds)
    hours = total // 3600
    minutes = total // 60 % 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


_SIZE_UNITS = [("GB", 1000 ** 3), ("MB", 1000 ** 2), ("KB", 1000)]


def format_file_size(size_bytes: int) -> str:
    """Human-readable size using decimal units ('1.5 MB')."""
    if size_bytes < 1000:
        return f"{max(size_bytes, 0)} bytes"
    for unit, factor in _SIZE_UNITS:
        if size_bytes >= factor:
            value = size_bytes / factor
            if value >= 100:
                return f"{value:.0f} {unit}"
            return f"{value:.1f} {unit}"
    return f"{size_bytes} bytes"


def format_relative_date(when: datetime, now: datetime | None = None) -> str:
    """Describe *when* relative to *now* ('5 minutes ago', 'yesterday', ...)."""
    if now is None:
        now = datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    delta = (now - when).total_seconds()
    if delta < 60:
        return "just now"
    if delta < 3600:
        minutes = int(delta // 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if delta < 86400:
        hours = int(delta // 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    days = int(delta // 86400)
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    return when.astimezone(now.tzinfo).strftime("%b %d, %Y")


def speed_label(speed: float) -> str:
    """Label for a playback speed menu entry."""
    if abs(speed - 1.0) < 1e-6:
        return "Normal"
    return f"{speed:.2f}x"
