"""Utility for logging FFmpeg invocations to a file."""

import logging
from pathlib import Path

from lm_player.utils.config import get_log_dir


def get_ffmpeg_log_path() -> Path:
    """Return the path to the FFmpeg log file."""
    return get_log_dir() / "ffmpeg.log"


# Separate logger so ffmpeg chatter never reaches the console
_logger = logging.getLogger("lm_player.ffmpeg_output")
_logger.setLevel(logging.DEBUG)
_logger.propagate = False


def _ensure_handler() -> None:
    if _logger.handlers:
        return
    fh = logging.FileHandler(get_ffmpeg_log_path(), encoding="utf-8")
    fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    _logger.addHandler(fh)


def log_ffmpeg_command(args: list[str]) -> None:
    """Log the FFmpeg/FFprobe command being executed."""
    _ensure_handler()
    _logger.info("Executing: %s", " ".join(args))


def log_ffmpeg_stderr(stderr: str | bytes | None) -> None:
    """Log the stderr of a finished FFmpeg process, line by line."""
    if not stderr:
        return
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    _ensure_handler()
    for line in stderr.splitlines():
        _logger.debug(line.rstrip())
