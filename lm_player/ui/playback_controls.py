"""Transport bar: play/pause, skip, seek slider, time labels, speed, volume."""

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QWidget,
)

from lm_player.services.playback_session import PlaybackSession
from lm_player.utils.config import PLAYBACK_SPEEDS
from lm_player.utils.time_utils import format_duration, speed_label


class PlaybackControls(QWidget):
    """Controls bound to a PlaybackSession. The slider works in milliseconds."""

    def __init__(self, session: PlaybackSession, parent=None):
        super().__init__(parent)
        self._session = session
        self._is_seeking = False

        self._back_btn = QPushButton("-{:.0f}".format(session.skip_interval))
        self._play_btn = QPushButton("▶")
        self._play_btn.setFixedWidth(36)
        self._fwd_btn = QPushButton("+{:.0f}".format(session.skip_interval))

        self._time_label = QLabel(format_duration(0))
        self._time_label.setFixedWidth(70)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._seek_slider = QSlider(Qt.Orientation.Horizontal)
        self._seek_slider.setRange(0, 0)

        self._duration_label = QLabel(format_duration(0))
        self._duration_label.setFixedWidth(70)
        self._duration_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._speed_combo = QComboBox()
        for speed in PLAYBACK_SPEEDS:
            self._speed_combo.addItem(speed_label(speed), speed)
        self._select_speed(session.playback_speed)

        self._volume_slider = QSlider(Qt.Orientation.Horizontal)
        self._volume_slider.setRange(0, 100)
        self._volume_slider.setValue(int(session.volume * 100))
        self._volume_slider.setFixedWidth(80)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.addWidget(self._back_btn)
        layout.addWidget(self._play_btn)
        layout.addWidget(self._fwd_btn)
        layout.addWidget(self._time_label)
        layout.addWidget(self._seek_slider, 1)
        layout.addWidget(self._duration_label)
        layout.addWidget(self._speed_combo)
        layout.addWidget(self._volume_slider)

        self._play_btn.clicked.connect(session.toggle_play_pause)
        self._back_btn.clicked.connect(session.skip_backward)
        self._fwd_btn.clicked.connect(session.skip_forward)
        self._seek_slider.sliderPressed.connect(self._on_seek_pressed)
        self._seek_slider.sliderReleased.connect(self._on_seek_released)
        self._seek_slider.sliderMoved.connect(self._on_seek_moved)
        self._speed_combo.currentIndexChanged.connect(self._on_speed_selected)
        self._volume_slider.valueChanged.connect(lambda v: session.set_volume(v / 100.0))

        session.position_changed.connect(self._on_position_changed)
        session.duration_changed.connect(self._on_duration_changed)
        session.playing_changed.connect(self._on_playing_changed)
        session.speed_changed.connect(self._select_speed)

        if session.duration > 0:
            self._on_duration_changed(session.duration)

    # --- slots ---

    def _on_seek_pressed(self) -> None:
        self._is_seeking = True

    def _on_seek_released(self) -> None:
        self._is_seeking = False
        self._session.seek(self._seek_slider.value() / 1000.0)

    def _on_seek_moved(self, value: int) -> None:
        self._time_label.setText(format_duration(value / 1000.0))

    def _on_speed_selected(self, index: int) -> None:
        speed = self._speed_combo.itemData(index)
        if speed:
            self._session.set_playback_speed(float(speed))

    def _select_speed(self, speed: float) -> None:
        """Show *speed* in the combo, adding an entry if it is not a preset."""
        combo = self._speed_combo
        combo.blockSignals(True)
        idx = combo.findData(speed)
        if idx < 0:
            idx = sum(1 for i in range(combo.count()) if combo.itemData(i) < speed)
            combo.insertItem(idx, speed_label(speed), speed)
        combo.setCurrentIndex(idx)
        combo.blockSignals(False)

    def _on_position_changed(self, seconds: float) -> None:
        if not self._is_seeking:
            self._seek_slider.setValue(int(seconds * 1000))
            self._time_label.setText(format_duration(seconds))

    def _on_duration_changed(self, seconds: float) -> None:
        self._seek_slider.setRange(0, int(seconds * 1000))
        self._duration_label.setText(format_duration(seconds))

    def _on_playing_changed(self, playing: bool) -> None:
        self._play_btn.setText("⏸" if playing else "▶")
