"""Thin wrapper over the ffmpeg/ffprobe executables.

All subprocess calls to FFmpeg go through this class so services never touch
subprocess directly and tests can swap in a mock runner.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

from lm_player.services.ffmpeg_logger import log_ffmpeg_command, log_ffmpeg_stderr
from lm_player.utils.ffmpeg_utils import find_ffmpeg, find_ffprobe


class FFmpegRunner:
    """Runs FFmpeg and FFprobe synchronously."""

    def __init__(self, ffmpeg_path: str | None = None, ffprobe_path: str | None = None):
        """Paths default to auto-discovery (config -> PATH -> bundled)."""
        self._ffmpeg = ffmpeg_path or find_ffmpeg()
        self._ffprobe = ffprobe_path or find_ffprobe()

    @property
    def ffmpeg_path(self) -> str | None:
        return self._ffmpeg

    @property
    def ffprobe_path(self) -> str | None:
        return self._ffprobe

    def is_available(self) -> bool:
        """Whether the ffmpeg executable exists."""
        return self._ffmpeg is not None and Path(self._ffmpeg).is_file()

    def has_ffprobe(self) -> bool:
        return self._ffprobe is not None and Path(self._ffprobe).is_file()

    def run(
        self,
        args: list[str],
        *,
        check: bool = False,
        capture_output: bool = True,
        text: bool = True,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess:
        """Run ffmpeg with *args* (binary path excluded)."""
        if not self._ffmpeg:
            raise FileNotFoundError("FFmpeg not found. Please install FFmpeg.")
        return self._execute([self._ffmpeg] + args, check, capture_output, text, timeout, kwargs)

    def run_ffprobe(
        self,
        args: list[str],
        *,
        check: bool = False,
        capture_output: bool = True,
        text: bool = True,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess:
        """Run ffprobe with *args* (binary path excluded)."""
        if not self._ffprobe:
            raise FileNotFoundError("FFprobe not found. Please install FFmpeg.")
        return self._execute([self._ffprobe] + args, check, capture_output, text, timeout, kwargs)

    @staticmethod
    def _execute(cmd, check, capture_output, text, timeout, kwargs) -> subprocess.CompletedProcess:
        run_kwargs = dict(capture_output=capture_output, text=text, **kwargs)
        if timeout is not None:
            run_kwargs["timeout"] = timeout
        if sys.platform == "win32":
            run_kwargs.setdefault("creationflags", subprocess.CREATE_NO_WINDOW)
        log_ffmpeg_command(cmd)
        result = subprocess.run(cmd, check=check, **run_kwargs)
        if result.returncode != 0:
            log_ffmpeg_stderr(result.stderr)
        return result


# Shared default instance
_default_runner: FFmpegRunner | None = None


def get_ffmpeg_runner() -> FFmpegRunner:
    """Return the process-wide FFmpegRunner, creating it on first use."""
    global _default_runner
    if _default_runner is None:
        _default_runner = FFmpegRunner()
    return _default_runner
