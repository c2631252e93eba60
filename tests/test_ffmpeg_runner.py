"""Tests for FFmpegRunner and executable discovery."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from lm_player.infrastructure.ffmpeg_runner import FFmpegRunner
from lm_player.services import ffmpeg_logger
from lm_player.utils import ffmpeg_utils


class TestFFmpegRunner:
    def test_explicit_paths(self):
        runner = FFmpegRunner("/opt/ffmpeg", "/opt/ffprobe")
        assert runner.ffmpeg_path == "/opt/ffmpeg"
        assert runner.ffprobe_path == "/opt/ffprobe"
        assert runner.is_available() is False

    def test_run_prepends_binary(self):
        runner = FFmpegRunner("/opt/ffmpeg", "/opt/ffprobe")
        done = subprocess.CompletedProcess([], 0, stdout="", stderr="")
        with patch("lm_player.infrastructure.ffmpeg_runner.subprocess.run", return_value=done) as run:
            runner.run(["-version"], timeout=5)
        cmd = run.call_args[0][0]
        assert cmd == ["/opt/ffmpeg", "-version"]
        assert run.call_args.kwargs["timeout"] == 5
        assert run.call_args.kwargs["capture_output"] is True

    def test_run_ffprobe_prepends_binary(self):
        runner = FFmpegRunner("/opt/ffmpeg", "/opt/ffprobe")
        done = subprocess.CompletedProcess([], 0, stdout="{}", stderr="")
        with patch("lm_player.infrastructure.ffmpeg_runner.subprocess.run", return_value=done) as run:
            runner.run_ffprobe(["-of", "json", "x.mp4"])
        assert run.call_args[0][0][0] == "/opt/ffprobe"
        assert "timeout" not in run.call_args.kwargs

    def test_missing_binary_raises(self):
        with patch("lm_player.infrastructure.ffmpeg_runner.find_ffmpeg", return_value=None), \
             patch("lm_player.infrastructure.ffmpeg_runner.find_ffprobe", return_value=None):
            runner = FFmpegRunner()
        with pytest.raises(FileNotFoundError):
            runner.run(["-version"])
        with pytest.raises(FileNotFoundError):
            runner.run_ffprobe(["-version"])

    def test_commands_and_errors_logged_to_file(self):
        runner = FFmpegRunner("/opt/ffmpeg", "/opt/ffprobe")
        failed = subprocess.CompletedProcess([], 1, stdout="", stderr="Invalid data found\n")
        with patch("lm_player.infrastructure.ffmpeg_runner.subprocess.run", return_value=failed):
            runner.run(["-i", "broken.mp4"])
        # The file handler is created once per process
        handler = ffmpeg_logger._logger.handlers[0]
        handler.flush()
        log_text = Path(handler.baseFilename).read_text(encoding="utf-8")
        assert "/opt/ffmpeg -i broken.mp4" in log_text
        assert "Invalid data found" in log_text


class TestDiscovery:
    def test_prefers_path_ffmpeg(self):
        with patch.object(ffmpeg_utils.shutil, "which", return_value="/usr/bin/ffmpeg"):
            with patch("lm_player.utils.config.FFMPEG_PATH", "/nonexistent/ffmpeg"):
                assert ffmpeg_utils.find_ffmpeg() == "/usr/bin/ffmpeg"

    def test_falls_back_to_bundled(self):
        with patch.object(ffmpeg_utils.shutil, "which", return_value=None), \
             patch("lm_player.utils.config.FFMPEG_PATH", "/nonexistent/ffmpeg"), \
             patch.object(ffmpeg_utils, "get_bundled_ffmpeg", return_value="/bundle/ffmpeg"):
            assert ffmpeg_utils.find_ffmpeg() == "/bundle/ffmpeg"

    def test_ffprobe_next_to_ffmpeg(self, tmp_path):
        probe = tmp_path / ffmpeg_utils._probe_name()
        probe.write_bytes(b"")
        with patch.object(ffmpeg_utils.shutil, "which", return_value=None), \
             patch.object(ffmpeg_utils, "find_ffmpeg", return_value=str(tmp_path / "ffmpeg")):
            assert ffmpeg_utils.find_ffprobe() == str(probe)

    def test_no_ffprobe(self):
        with patch.object(ffmpeg_utils.shutil, "which", return_value=None), \
             patch.object(ffmpeg_utils, "find_ffmpeg", return_value=None):
            assert ffmpeg_utils.find_ffprobe() is None
