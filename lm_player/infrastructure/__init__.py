"""Infrastructure layer: external tools and platform media APIs.

Services depend on these abstractions rather than on subprocess or
QtMultimedia directly.
"""

from lm_player.infrastructure.ffmpeg_runner import FFmpegRunner
from lm_player.infrastructure.media_engine import MediaEngine, QtMediaEngine

__all__ = [
    "FFmpegRunner",
    "MediaEngine",
    "QtMediaEngine",
]
