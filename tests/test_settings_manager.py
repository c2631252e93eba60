"""Tests for SettingsManager (QSettings in an ini file)."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QSettings

from lm_player.services.settings_manager import SettingsManager


@pytest.fixture
def settings_path(tmp_path):
    return str(tmp_path / "settings.ini")


@pytest.fixture
def manager(qapp, settings_path):
    return SettingsManager(QSettings(settings_path, QSettings.Format.IniFormat))


class TestSettingsManager:
    def test_defaults(self, manager):
        assert manager.get_default_playback_speed() == 1.0
        assert manager.get_auto_play_next() is False
        assert manager.get_remember_position() is False
        assert manager.get_show_thumbnails() is True

    def test_speed_round_trip(self, manager):
        manager.set_default_playback_speed(1.25)
        assert manager.get_default_playback_speed() == 1.25

    @pytest.mark.parametrize("stored", [0, -2, "fast"])
    def test_invalid_speed_falls_back(self, manager, stored):
        manager._settings.setValue(SettingsManager.KEY_DEFAULT_SPEED, stored)
        assert manager.get_default_playback_speed() == 1.0

    def test_flags(self, manager):
        manager.set_auto_play_next(True)
        manager.set_remember_position(True)
        manager.set_show_thumbnails(False)
        assert manager.get_auto_play_next() is True
        assert manager.get_remember_position() is True
        assert manager.get_show_thumbnails() is False

    def test_persisted_across_instances(self, qapp, manager, settings_path):
        manager.set_default_playback_speed(2.0)
        manager.set_remember_position(True)
        manager.sync()

        reopened = SettingsManager(QSettings(settings_path, QSettings.Format.IniFormat))
        assert reopened.get_default_playback_speed() == 2.0
        assert reopened.get_remember_position() is True

    def test_reset_to_defaults(self, manager):
        manager.set_default_playback_speed(0.5)
        manager.set_show_thumbnails(False)
        manager.reset_to_defaults()
        assert manager.get_default_playback_speed() == 1.0
        assert manager.get_show_thumbnails() is True
