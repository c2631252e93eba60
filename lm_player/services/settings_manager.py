"""Settings manager for user preferences."""

from __future__ import annotations

from PySide6.QtCore import QSettings

from lm_player.utils.config import DEFAULT_PLAYBACK_SPEED


class SettingsManager:
    """Wrapper around QSettings for type-safe preference access."""

    KEY_DEFAULT_SPEED = "playback/default_speed"
    KEY_AUTO_PLAY_NEXT = "playback/auto_play_next"
    KEY_REMEMBER_POSITION = "playback/remember_position"
    KEY_SHOW_THUMBNAILS = "display/show_thumbnails"

    def __init__(self, settings: QSettings | None = None):
        self._settings = settings if settings is not None else QSettings()

    # ---------------------------------------------------- Playback

    def get_default_playback_speed(self) -> float:
        """Default speed for new playback sessions (unset or invalid -> 1.0)."""
        try:
            speed = float(self._settings.value(self.KEY_DEFAULT_SPEED, DEFAULT_PLAYBACK_SPEED))
        except (TypeError, ValueError):
            return DEFAULT_PLAYBACK_SPEED
        return speed if speed > 0 else DEFAULT_PLAYBACK_SPEED

    def set_default_playback_speed(self, speed: float) -> None:
        self._settings.setValue(self.KEY_DEFAULT_SPEED, float(speed))

    def get_auto_play_next(self) -> bool:
        return self._settings.value(self.KEY_AUTO_PLAY_NEXT, False, bool)

    def set_auto_play_next(self, enabled: bool) -> None:
        self._settings.setValue(self.KEY_AUTO_PLAY_NEXT, bool(enabled))

    def get_remember_position(self) -> bool:
        """Resume videos from their last saved position (default: off)."""
        return self._settings.value(self.KEY_REMEMBER_POSITION, False, bool)

    def set_remember_position(self, enabled: bool) -> None:
        self._settings.setValue(self.KEY_REMEMBER_POSITION, bool(enabled))

    # ---------------------------------------------------- Display

    def get_show_thumbnails(self) -> bool:
        return self._settings.value(self.KEY_SHOW_THUMBNAILS, True, bool)

    def set_show_thumbnails(self, enabled: bool) -> None:
        self._settings.setValue(self.KEY_SHOW_THUMBNAILS, bool(enabled))

    # ---------------------------------------------------- General

    def reset_to_defaults(self) -> None:
        self._settings.clear()

    def sync(self) -> None:
        """Force synchronization of settings to disk."""
        self._settings.sync()
