"""Application configuration constants."""

from __future__ import annotations

import sys
from pathlib import Path

APP_NAME = "LM Player"
APP_VERSION = "1.0.0"
ORG_NAME = "LMPlayer"

# FFmpeg
if sys.platform == "darwin":
    FFMPEG_PATH = "/opt/homebrew/bin/ffmpeg"
elif sys.platform == "win32":
    FFMPEG_PATH = r"C:\ffmpeg\bin\ffmpeg.exe"
else:
    FFMPEG_PATH = "ffmpeg"

# Storage layout (under the user's home directory)
APP_DIR_NAME = ".lmplayer"
VIDEO_DIR_NAME = "videos"
LIBRARY_FILE_NAME = "videos.json"
SETTINGS_FILE_NAME = "settings.ini"
LOG_DIR_NAME = "logs"


def get_app_dir() -> Path:
    """Return the application data directory, creating it if needed."""
    app_dir = Path.home() / APP_DIR_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_log_dir() -> Path:
    log_dir = get_app_dir() / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


# Supported video formats
VIDEO_EXTENSIONS = [".mp4", ".m4v", ".mov", ".mkv", ".avi", ".webm", ".wmv", ".3gp"]
VIDEO_FILTER = "Video Files ({});;All Files (*)".format(
    " ".join(f"*{ext}" for ext in VIDEO_EXTENSIONS)
)

# Import
THUMBNAIL_TIME_SEC = 1.0
THUMBNAIL_MAX_SIZE = 300       # px, longest edge
PROBE_TIMEOUT_SEC = 15
THUMBNAIL_TIMEOUT_SEC = 10
MAX_NAME_COLLISIONS = 9999

# Playback
PLAYBACK_SPEEDS = (0.5, 0.75, 1.0, 1.25, 1.5, 2.0)
DEFAULT_PLAYBACK_SPEED = 1.0
DEFAULT_SKIP_SECONDS = 15.0
POSITION_UPDATE_INTERVAL_MS = 100

# Library queries
RECENTLY_WATCHED_LIMIT = 10
