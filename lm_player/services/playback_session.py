"""Playback session - transport state for one video."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, QTimer, Signal

from lm_player.infrastructure.media_engine import MediaEngine
from lm_player.models.video_record import VideoRecord
from lm_player.utils.config import (
    DEFAULT_PLAYBACK_SPEED,
    DEFAULT_SKIP_SECONDS,
    POSITION_UPDATE_INTERVAL_MS,
)

if TYPE_CHECKING:
    from lm_player.services.library_store import LibraryStore

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackSession(QObject):
    """Drives a MediaEngine for exactly one VideoRecord.

    The session samples the engine position every `update_interval_ms` while
    media is loaded and publishes it as `current_time`. The first play()
    counts as a view; close() saves the last position back to the library.
    If the media cannot be opened the session stays IDLE with zero duration
    and every transport command becomes a no-op.

    Signals:
        state_changed(object): New PlaybackState.
        playing_changed(bool)
        position_changed(float): Seconds.
        duration_changed(float): Seconds, emitted once when it resolves.
        volume_changed(float)
        speed_changed(float)
        load_failed(str)
        closed(): Emitted once, after close() has released the engine.
    """

    state_changed = Signal(object)
    playing_changed = Signal(bool)
    position_changed = Signal(float)
    duration_changed = Signal(float)
    volume_changed = Signal(float)
    speed_changed = Signal(float)
    load_failed = Signal(str)
    closed = Signal()

    def __init__(
        self,
        record: VideoRecord,
        library: LibraryStore,
        engine: MediaEngine,
        default_speed: float = DEFAULT_PLAYBACK_SPEED,
        resume: bool = False,
        skip_interval: float = DEFAULT_SKIP_SECONDS,
        update_interval_ms: int = POSITION_UPDATE_INTERVAL_MS,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._video_id = record.video_id
        self._title = record.title
        self._library = library
        self._engine = engine
        if engine.parent() is None:
            engine.setParent(self)

        self.skip_interval = skip_interval
        self._speed = default_speed if default_speed > 0 else DEFAULT_PLAYBACK_SPEED
        self._volume = 1.0
        self._current_time = 0.0
        self._duration = 0.0
        self._state = PlaybackState.IDLE
        self._loaded = False
        self._view_recorded = False
        self._closed = False
        self._resume_at: float | None = (
            record.last_position_sec if resume and record.last_position_sec > 0 else None
        )

        self._timer = QTimer(self)
        self._timer.setInterval(update_interval_ms)
        self._timer.timeout.connect(self._sample_position)

        self._engine.duration_resolved.connect(self._on_duration_resolved)
        self._engine.load_failed.connect(self._on_load_failed)
        self._engine.set_volume(self._volume)

        if self._engine.open(record.file_path):
            self._loaded = True
            self._timer.start()
            if self._engine.duration() > 0:
                self._on_duration_resolved(self._engine.duration())
        else:
            logger.warning("Cannot open %s for playback", record.file_path)

    # ------------------------------------------------------------------ Observable state

    @property
    def video_id(self) -> str:
        return self._video_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def playback_speed(self) -> float:
        return self._speed

    @property
    def engine(self) -> MediaEngine:
        return self._engine

    # ------------------------------------------------------------------ Transport

    def play(self) -> None:
        if self._closed or not self._loaded:
            return
        self._engine.set_rate(self._speed)
        self._set_state(PlaybackState.PLAYING)
        if not self._view_recorded:
            self._view_recorded = True
            self._library.record_view_start(self._video_id)

    def pause(self) -> None:
        if self._state is not PlaybackState.PLAYING:
            return
        self._engine.set_rate(0.0)
        self._set_state(PlaybackState.PAUSED)

    def toggle_play_pause(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, seconds: float) -> None:
        """Jump to *seconds*, clamped to [0, duration] (or >= 0 while duration is unknown)."""
        if self._closed or not self._loaded:
            return
        target = self._clamp(seconds)
        self._engine.seek(target)
        self._set_current_time(target)

    def skip(self, delta_seconds: float) -> None:
        self.seek(self._current_time + delta_seconds)

    def skip_forward(self) -> None:
        self.skip(self.skip_interval)

    def skip_backward(self) -> None:
        self.skip(-self.skip_interval)

    def set_playback_speed(self, multiplier: float) -> None:
        """Store the speed; it reaches the engine now if playing, else on next play()."""
        if multiplier <= 0:
            raise ValueError(f"Playback speed must be positive, got {multiplier}")
        self._speed = float(multiplier)
        self.speed_changed.emit(self._speed)
        if self._state is PlaybackState.PLAYING:
            self._engine.set_rate(self._speed)

    def set_volume(self, level: float) -> None:
        self._volume = max(0.0, min(1.0, float(level)))
        self._engine.set_volume(self._volume)
        self.volume_changed.emit(self._volume)

    def close(self) -> None:
        """End the session: pause, save the position, stop sampling, release the engine."""
        if self._closed:
            return
        self.pause()
        self._timer.stop()
        if self._loaded:
            self._set_current_time(self._clamp(self._engine.position()))
            self._library.record_playback_position(self._video_id, self._current_time)
        self._closed = True

        self._timer.timeout.disconnect(self._sample_position)
        self._engine.duration_resolved.disconnect(self._on_duration_resolved)
        self._engine.load_failed.disconnect(self._on_load_failed)
        self._engine.release()
        logger.debug("Playback session for %s closed at %.1fs", self._video_id, self._current_time)
        self.closed.emit()

    # ------------------------------------------------------------------ Engine callbacks

    def _sample_position(self) -> None:
        if self._closed or not self._loaded:
            return
        self._set_current_time(self._engine.position())

    def _on_duration_resolved(self, seconds: float) -> None:
        if self._closed or self._duration > 0 or seconds <= 0:
            return
        self._duration = float(seconds)
        self.duration_changed.emit(self._duration)

        if self._resume_at is not None:
            resume_at, self._resume_at = self._resume_at, None
            if resume_at < self._duration:
                self.seek(resume_at)

    def _on_load_failed(self, message: str) -> None:
        if self._closed:
            return
        logger.warning("Playback of %s failed: %s", self._title, message)
        self._loaded = False
        self._timer.stop()
        self._duration = 0.0
        self._set_state(PlaybackState.IDLE)
        self.load_failed.emit(message)

    # ------------------------------------------------------------------ Internals

    def _clamp(self, seconds: float) -> float:
        seconds = max(0.0, float(seconds))
        if self._duration > 0:
            seconds = min(seconds, self._duration)
        return seconds

    def _set_current_time(self, seconds: float) -> None:
        if seconds != self._current_time:
            self._current_time = seconds
            self.position_changed.emit(seconds)

    def _set_state(self, state: PlaybackState) -> None:
        if state is self._state:
            return
        was_playing = self.is_playing
        self._state = state
        self.state_changed.emit(state)
        if was_playing != self.is_playing:
            self.playing_changed.emit(self.is_playing)
