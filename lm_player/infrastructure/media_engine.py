"""Media engine abstraction used by PlaybackSession.

The engine follows a rate-based transport model: a rate of 0 means paused,
any positive rate means playing at that speed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

logger = logging.getLogger(__name__)


class MediaEngine(QObject):
    """Interface for a single-source media player.

    Signals:
        duration_resolved(float): Duration in seconds once the container is parsed.
        load_failed(str): The opened resource cannot be played.
    """

    duration_resolved = Signal(float)
    load_failed = Signal(str)

    def open(self, path: str | Path) -> bool:
        """Start loading *path*. Returns False when it cannot be opened at all."""
        raise NotImplementedError

    def set_rate(self, rate: float) -> None:
        raise NotImplementedError

    def rate(self) -> float:
        raise NotImplementedError

    def seek(self, seconds: float) -> None:
        raise NotImplementedError

    def set_volume(self, level: float) -> None:
        raise NotImplementedError

    def position(self) -> float:
        raise NotImplementedError

    def duration(self) -> float:
        """Duration in seconds, 0.0 while unknown."""
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class QtMediaEngine(MediaEngine):
    """MediaEngine backed by QMediaPlayer + QAudioOutput."""

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._player = QMediaPlayer(self)
        self._audio_output = QAudioOutput(self)
        self._player.setAudioOutput(self._audio_output)
        self._rate = 0.0
        self._duration_emitted = False

        self._player.durationChanged.connect(self._on_duration_changed)
        self._player.errorOccurred.connect(self._on_error)
        self._player.mediaStatusChanged.connect(self._on_media_status)

    @property
    def player(self) -> QMediaPlayer:
        return self._player

    def set_video_output(self, output) -> None:
        """Attach a QVideoWidget / QGraphicsVideoItem for rendering."""
        self._player.setVideoOutput(output)

    def open(self, path: str | Path) -> bool:
        path = Path(path)
        if not path.is_file():
            logger.warning("Media file missing: %s", path)
            return False
        self._duration_emitted = False
        self._player.setSource(QUrl.fromLocalFile(str(path)))
        return True

    def set_rate(self, rate: float) -> None:
        if rate <= 0:
            self._player.pause()
            self._rate = 0.0
            return
        if abs(self._player.playbackRate() - rate) > 0.001:
            self._player.setPlaybackRate(rate)
        if self._player.playbackState() != QMediaPlayer.PlaybackState.PlayingState:
            self._player.play()
        self._rate = rate

    def rate(self) -> float:
        return self._rate

    def seek(self, seconds: float) -> None:
        self._player.setPosition(int(round(seconds * 1000)))

    def set_volume(self, level: float) -> None:
        self._audio_output.setVolume(level)

    def position(self) -> float:
        return self._player.position() / 1000.0

    def duration(self) -> float:
        return max(0, self._player.duration()) / 1000.0

    def release(self) -> None:
        self._player.stop()
        self._player.setSource(QUrl())
        self._rate = 0.0

    # ------------------------------------------------------------------ Slots

    def _on_duration_changed(self, duration_ms: int) -> None:
        if duration_ms > 0 and not self._duration_emitted:
            self._duration_emitted = True
            self.duration_resolved.emit(duration_ms / 1000.0)

    def _on_error(self, error, message: str = "") -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        logger.warning("Media engine error %s: %s", error, message)
        self._rate = 0.0
        self.load_failed.emit(message or str(error))

    def _on_media_status(self, status) -> None:
        if status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._rate = 0.0
            self.load_failed.emit("Invalid media")
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._rate = 0.0
