"""
Shared fixtures for the LM Player test suite.
"""
import os
from pathlib import Path

import pytest

# Headless Qt for CI / sandboxes
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from lm_player.services.library_store import LibraryStore  # noqa: E402
from lm_player.services.video_repository import VideoRepository  # noqa: E402
from tests.fakes import FakeClock, fake_prober, fake_thumbnailer  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep ~/.lmplayer (logs, default storage) inside the test's tmp dir."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def src(tmp_path: Path) -> Path:
    """Directory holding files to import."""
    d = tmp_path / "source"
    d.mkdir()
    return d


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def library(qapp, tmp_path, clock) -> LibraryStore:
    """LibraryStore over a temp JSON file and temp storage, with fake probing."""
    repo = VideoRepository(tmp_path / "lib" / "videos.json")
    return LibraryStore(
        repository=repo,
        storage_dir=tmp_path / "lib" / "videos",
        prober=fake_prober(),
        thumbnailer=fake_thumbnailer,
        clock=clock,
    )
