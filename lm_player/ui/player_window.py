"""Minimal player window around a PlaybackSession."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QKeySequence, QShortcut
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from lm_player.infrastructure.media_engine import QtMediaEngine
from lm_player.services.playback_session import PlaybackSession
from lm_player.ui.playback_controls import PlaybackControls


class PlayerWindow(QWidget):
    """Video surface plus transport bar. Closing the window ends the session."""

    def __init__(self, session: PlaybackSession, parent=None):
        super().__init__(parent)
        self._session = session
        self.setWindowTitle(session.title or "Untitled")
        self.resize(960, 600)

        self._video = QVideoWidget()
        self._video.setStyleSheet("background: black;")
        if isinstance(session.engine, QtMediaEngine):
            session.engine.set_video_output(self._video)

        self._error_label = QLabel("This video can't be played.")
        self._error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._error_label.setVisible(not session.is_loaded)

        self._controls = PlaybackControls(session)
        self._controls.setEnabled(session.is_loaded)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._video, 1)
        layout.addWidget(self._error_label)
        layout.addWidget(self._controls)

        for key, action in (
            (Qt.Key.Key_Space, session.toggle_play_pause),
            (Qt.Key.Key_Right, session.skip_forward),
            (Qt.Key.Key_Left, session.skip_backward),
        ):
            QShortcut(QKeySequence(key), self).activated.connect(action)

        session.load_failed.connect(self._on_load_failed)

    def _on_load_failed(self, _message: str) -> None:
        self._error_label.setVisible(True)
        self._controls.setEnabled(False)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._session.close()
        super().closeEvent(event)
