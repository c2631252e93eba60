"""AppContext - owner of the application's long-lived services.

Created once at startup and passed to whatever needs the library or the
settings; shutdown() is called once before the process exits.
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Callable

from PySide6.QtCore import QSettings

from lm_player.infrastructure.media_engine import MediaEngine, QtMediaEngine
from lm_player.services import managed_storage
from lm_player.services.library_store import LibraryStore
from lm_player.services.playback_session import PlaybackSession
from lm_player.services.settings_manager import SettingsManager
from lm_player.services.video_repository import VideoRepository
from lm_player.utils.config import LIBRARY_FILE_NAME, SETTINGS_FILE_NAME, VIDEO_DIR_NAME

logger = logging.getLogger(__name__)


class AppContext:
    """Service container shared by the entry point and any UI."""

    def __init__(
        self,
        settings: SettingsManager | None = None,
        library: LibraryStore | None = None,
        engine_factory: Callable[[], MediaEngine] = QtMediaEngine,
    ) -> None:
        self.settings = settings or SettingsManager()
        self.library = library or LibraryStore()
        self._engine_factory = engine_factory
        self._sessions: list[PlaybackSession] = []

    @classmethod
    def create(cls, data_dir: Path | None = None) -> AppContext:
        """Build the default services, optionally rooted at *data_dir*.

        With a *data_dir* the preferences live there too, in an ini file,
        instead of the platform settings store.
        """
        if data_dir is None:
            return cls(
                library=LibraryStore(
                    VideoRepository(), managed_storage.default_storage_dir()
                )
            )
        data_dir.mkdir(parents=True, exist_ok=True)
        settings = SettingsManager(
            QSettings(str(data_dir / SETTINGS_FILE_NAME), QSettings.Format.IniFormat)
        )
        library = LibraryStore(
            VideoRepository(data_dir / LIBRARY_FILE_NAME), data_dir / VIDEO_DIR_NAME
        )
        return cls(settings=settings, library=library)

    def open_session(self, video_id: str) -> PlaybackSession | None:
        """Start a playback session for *video_id*, or None if it is unknown."""
        record = self.library.get_video(video_id)
        if record is None:
            logger.warning("open_session: unknown video %s", video_id)
            return None
        session = PlaybackSession(
            record,
            self.library,
            self._engine_factory(),
            default_speed=self.settings.get_default_playback_speed(),
            resume=self.settings.get_remember_position(),
        )
        session.closed.connect(partial(self._forget, session))
        self._sessions.append(session)
        return session

    def close_session(self, session: PlaybackSession) -> None:
        session.close()

    def _forget(self, session: PlaybackSession) -> None:
        if session in self._sessions:
            self._sessions.remove(session)

    def shutdown(self) -> None:
        for session in list(self._sessions):
            session.close()
        self._sessions.clear()
        self.library.shutdown()
        self.settings.sync()
