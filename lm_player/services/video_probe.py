"""Probe video metadata and grab thumbnails using ffprobe/ffmpeg."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from lm_player.infrastructure.ffmpeg_runner import FFmpegRunner, get_ffmpeg_runner
from lm_player.utils.config import (
    PROBE_TIMEOUT_SEC,
    THUMBNAIL_MAX_SIZE,
    THUMBNAIL_TIME_SEC,
    THUMBNAIL_TIMEOUT_SEC,
)

logger = logging.getLogger(__name__)

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


class ProbeError(Exception):
    """ffprobe ran but could not read the file as a media container."""


@dataclass
class VideoInfo:
    """Metadata extracted from a video file."""

    duration_sec: float = 0.0
    width: int = 0
    height: int = 0
    has_audio: bool = False


def probe_video(video_path: Path | str, runner: FFmpegRunner | None = None) -> VideoInfo:
    """Probe a video file for duration, dimensions and audio presence.

    Returns an empty *VideoInfo* when ffprobe is not installed.
    Raises *ProbeError* when ffprobe rejects the file or its output is unreadable.
    """
    runner = runner or get_ffmpeg_runner()
    if not runner.ffprobe_path:
        logger.warning("ffprobe not found; duration of %s left unknown", video_path)
        return VideoInfo()

    try:
        result = runner.run_ffprobe(
            [
                "-v", "error",
                "-show_entries", "stream=codec_type,width,height",
                "-show_entries", "format=duration",
                "-of", "json",
                str(video_path),
            ],
            timeout=PROBE_TIMEOUT_SEC,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise ProbeError(f"ffprobe failed for {Path(video_path).name}: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or "").strip().splitlines()
        reason = detail[-1] if detail else f"exit code {result.returncode}"
        raise ProbeError(f"Not a readable video: {Path(video_path).name} ({reason})")

    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as e:
        raise ProbeError(f"Unreadable ffprobe output for {Path(video_path).name}") from e

    info = VideoInfo()
    for stream in data.get("streams", []):
        codec_type = stream.get("codec_type", "")
        if codec_type == "video" and info.width == 0:
            info.width = int(stream.get("width", 0) or 0)
            info.height = int(stream.get("height", 0) or 0)
        elif codec_type == "audio":
            info.has_audio = True

    dur_str = data.get("format", {}).get("duration")
    if dur_str:
        try:
            info.duration_sec = max(0.0, float(dur_str))
        except ValueError:
            logger.warning("Bad duration %r for %s", dur_str, video_path)
    return info


def extract_thumbnail(
    video_path: Path | str,
    at_sec: float = THUMBNAIL_TIME_SEC,
    max_size: int = THUMBNAIL_MAX_SIZE,
    runner: FFmpegRunner | None = None,
) -> bytes | None:
    """Decode one frame near *at_sec* and return it as PNG bytes.

    The frame is scaled to fit within max_size x max_size. Returns None on
    any failure; a missing thumbnail is never an error.
    """
    runner = runner or get_ffmpeg_runner()
    if not runner.ffmpeg_path:
        return None

    for offset in (at_sec, 0.0) if at_sec > 0 else (0.0,):
        data = _grab_frame(runner, video_path, offset, max_size)
        if data:
            return data
    return None


def _grab_frame(runner: FFmpegRunner, video_path, offset: float, max_size: int) -> bytes | None:
    scale = (
        f"scale='min({max_size},iw)':'min({max_size},ih)'"
        ":force_original_aspect_ratio=decrease"
    )
    args = [
        "-v", "error",
        "-ss", f"{offset:.3f}",
        "-i", str(video_path),
        "-frames:v", "1",
        "-vf", scale,
        "-f", "image2pipe",
        "-vcodec", "png",
        "-",
    ]
    try:
        result = runner.run(args, text=False, timeout=THUMBNAIL_TIMEOUT_SEC)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Thumbnail extraction failed for %s: %s", video_path, e)
        return None
    if result.returncode != 0 or not result.stdout:
        return None
    if not result.stdout.startswith(_PNG_MAGIC):
        return None
    return result.stdout
