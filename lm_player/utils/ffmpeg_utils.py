"""Locate the ffmpeg and ffprobe executables."""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _probe_name() -> str:
    return "ffprobe.exe" if sys.platform == "win32" else "ffprobe"


def get_bundled_ffmpeg() -> str | None:
    """Return the ffmpeg binary shipped with imageio-ffmpeg (downloaded on first use)."""
    try:
        import imageio_ffmpeg

        return imageio_ffmpeg.get_ffmpeg_exe()
    except Exception as e:
        logger.debug("Bundled ffmpeg unavailable: %s", e)
        return None


def find_ffmpeg() -> str | None:
    """
    Find ffmpeg executable.

    Search order:
    1. Configured path (config.FFMPEG_PATH)
    2. System PATH
    3. Bundled binary from imageio-ffmpeg

    Returns:
        Path to ffmpeg or None if not found
    """
    from .config import FFMPEG_PATH

    if Path(FFMPEG_PATH).is_file():
        return FFMPEG_PATH

    system_ffmpeg = shutil.which("ffmpeg")
    if system_ffmpeg:
        return system_ffmpeg

    return get_bundled_ffmpeg()


def find_ffprobe() -> str | None:
    """
    Find ffprobe executable (PATH first, then alongside ffmpeg).

    imageio-ffmpeg does not ship ffprobe, so the bundled fallback only helps
    when a system ffprobe happens to sit next to it.
    """
    ffprobe = shutil.which("ffprobe")
    if ffprobe:
        return ffprobe

    ffmpeg_path = find_ffmpeg()
    if ffmpeg_path:
        candidate = Path(ffmpeg_path).parent / _probe_name()
        if candidate.is_file():
            return str(candidate)

    return None
