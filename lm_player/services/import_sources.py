"""Import sources: anything that can hand over one local video file.

Every source answers pick() with a readable local path, or None if the
user cancelled. The library never cares which source produced the path.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QFileDialog, QWidget

from lm_player.utils.config import VIDEO_FILTER

logger = logging.getLogger(__name__)


class ImportSource:
    """Yields zero or one local file path per pick."""

    def pick(self) -> Path | None:
        raise NotImplementedError

    def release(self, path: Path) -> None:
        """Called once the library is done with a path returned by pick()."""


class StaticPathSource(ImportSource):
    """Hands out a fixed path once (scripted imports, tests)."""

    def __init__(self, path: str | Path):
        self._path: Path | None = Path(path)

    def pick(self) -> Path | None:
        path, self._path = self._path, None
        if path is None or not path.is_file():
            return None
        return path


class FilePickerSource(ImportSource):
    """Standard open-file dialog restricted to video files."""

    def __init__(self, parent: QWidget | None = None, start_dir: str = ""):
        self._parent = parent
        self._start_dir = start_dir

    def _ask(self, start_dir: str) -> str:
        path, _ = QFileDialog.getOpenFileName(
            self._parent, "Import Video", start_dir, VIDEO_FILTER
        )
        return path

    def pick(self) -> Path | None:
        path = self._ask(self._start_dir)
        return Path(path) if path else None


class MoviesFolderSource(FilePickerSource):
    """Picker rooted at the user's Movies folder.

    The pick is first copied to a temporary location, so the library
    never reads from the user's media folder while importing. The staged
    copy is deleted again by release().
    """

    def __init__(self, parent: QWidget | None = None):
        movies = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.MoviesLocation)
        super().__init__(parent, movies)
        self._temp_dir = Path(tempfile.gettempdir()) / "lmplayer_import"

    def pick(self) -> Path | None:
        path = self._ask(self._start_dir)
        if not path:
            return None
        source = Path(path)
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        temp_copy = self._temp_dir / source.name
        try:
            if temp_copy.exists():
                temp_copy.unlink()
            shutil.copy2(source, temp_copy)
        except OSError as e:
            logger.error("Could not stage %s for import: %s", source, e)
            temp_copy.unlink(missing_ok=True)
            return None
        return temp_copy

    def release(self, path: Path) -> None:
        path = Path(path)
        if path.parent != self._temp_dir:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove staged import %s: %s", path, e)
