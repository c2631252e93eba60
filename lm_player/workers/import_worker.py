"""Background worker that copies and probes one video for import."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QObject, Signal

from lm_player.services.video_importer import (
    Prober,
    Thumbnailer,
    VideoImportError,
    prepare_import,
)
from lm_player.services.video_probe import extract_thumbnail, probe_video


class ImportWorker(QObject):
    """Runs prepare_import() off the UI thread.

    The record is NOT committed here; the owner commits it when `finished`
    is delivered back on its own thread.

    Signals:
        finished(object): Prepared VideoRecord.
        error(str): Human-readable failure message.
    """

    finished = Signal(object)
    error = Signal(str)

    def __init__(
        self,
        source_path: Path,
        storage_dir: Path,
        prober: Prober = probe_video,
        thumbnailer: Thumbnailer = extract_thumbnail,
    ):
        super().__init__()
        self._source_path = Path(source_path)
        self._storage_dir = storage_dir
        self._prober = prober
        self._thumbnailer = thumbnailer

    @property
    def source_path(self) -> Path:
        return self._source_path

    def run(self) -> None:
        try:
            record = prepare_import(
                self._source_path,
                self._storage_dir,
                prober=self._prober,
                thumbnailer=self._thumbnailer,
            )
        except VideoImportError as e:
            self.error.emit(str(e))
            return
        except Exception as e:
            self.error.emit(f"Import of {self._source_path.name} failed: {e}")
            return
        self.finished.emit(record)
