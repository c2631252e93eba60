"""Library store - the single source of truth for imported videos."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from PySide6.QtCore import QObject, QThread, Signal, Slot

from lm_player.models.library_query import VideoFilter, VideoSortOption
from lm_player.models.video_record import VideoRecord
from lm_player.services import managed_storage
from lm_player.services.video_importer import (
    Prober,
    Thumbnailer,
    VideoImportError,
    prepare_import,
)
from lm_player.services.video_probe import extract_thumbnail, probe_video
from lm_player.services.video_query import query_videos
from lm_player.services.video_repository import PersistenceError, VideoRepository
from lm_player.utils.config import RECENTLY_WATCHED_LIMIT
from lm_player.workers.import_worker import ImportWorker

if TYPE_CHECKING:
    from lm_player.services.import_sources import ImportSource

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LibraryStore(QObject):
    """Owns the video collection and mediates every change to it.

    Records handed out are copies; changing one has no effect until it goes
    back through a mutation method.

    Each mutation persists the whole collection and then republishes it via
    `videos_changed`. `record_playback_position` is the one exception: it
    persists without republishing, since it runs on a high-frequency path.

    All methods must be called on the thread that owns this object. Async
    imports do their file work on a QThread and are committed back here.

    Signals:
        videos_changed(list): Full collection, newest first.
        import_started(str): Source path of the import that just began.
        import_finished(object): Committed VideoRecord.
        import_failed(str): Human-readable error.
        importing_changed(bool): Whether an import is in flight.
    """

    videos_changed = Signal(list)
    import_started = Signal(str)
    import_finished = Signal(object)
    import_failed = Signal(str)
    importing_changed = Signal(bool)

    def __init__(
        self,
        repository: VideoRepository | None = None,
        storage_dir: Path | None = None,
        prober: Prober = probe_video,
        thumbnailer: Thumbnailer = extract_thumbnail,
        clock: Callable[[], datetime] = _utc_now,
        recent_limit: int = RECENTLY_WATCHED_LIMIT,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._repository = repository or VideoRepository()
        self._storage_dir = storage_dir or managed_storage.default_storage_dir()
        self._prober = prober
        self._thumbnailer = thumbnailer
        self._clock = clock
        self.recent_limit = recent_limit

        self._pending_imports: deque[Path] = deque()
        self._import_thread: QThread | None = None
        self._import_worker: ImportWorker | None = None

    # ------------------------------------------------------------------ Read access

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    @property
    def videos(self) -> list[VideoRecord]:
        """Snapshot of the collection, newest first."""
        return self._repository.fetch_all()

    def get_video(self, video_id: str) -> VideoRecord | None:
        return self._repository.get(video_id)

    def video_count(self) -> int:
        return self._repository.count()

    def total_size(self) -> int:
        """Sum of file sizes over the whole collection (ignores any filter)."""
        return sum(v.file_size for v in self._repository.fetch_all())

    def query(
        self,
        video_filter: VideoFilter = VideoFilter.ALL,
        sort: VideoSortOption = VideoSortOption.DATE_ADDED_NEWEST,
        search_text: str = "",
    ) -> list[VideoRecord]:
        """Filtered, sorted, searched view. Never mutates anything."""
        return query_videos(
            self._repository.fetch_all(),
            video_filter,
            sort,
            search_text,
            recent_limit=self.recent_limit,
        )

    def reload(self) -> None:
        """Re-read the store from disk and republish."""
        self._repository.load()
        self._publish()

    # ------------------------------------------------------------------ Import

    def import_video(self, source: str | Path) -> VideoRecord:
        """Import synchronously on the calling thread.

        Raises:
            VideoImportError: on any failure; no file or record is left behind.
        """
        record = prepare_import(
            Path(source),
            self._storage_dir,
            prober=self._prober,
            thumbnailer=self._thumbnailer,
            now=self._clock(),
        )
        return self._commit_import(record)

    def import_from(self, source: ImportSource) -> VideoRecord | None:
        """Import whatever *source* picks. Returns None if nothing was picked.

        The picked path is handed back to the source afterwards, whether or
        not the import succeeded.
        """
        path = source.pick()
        if path is None:
            return None
        try:
            return self.import_video(path)
        finally:
            source.release(path)

    def import_video_async(self, source: str | Path) -> None:
        """Queue an import. Imports run one at a time, in request order."""
        self._pending_imports.append(Path(source))
        if self._import_thread is None:
            self.importing_changed.emit(True)
            self._start_next_import()

    @property
    def is_importing(self) -> bool:
        return self._import_thread is not None or bool(self._pending_imports)

    def _start_next_import(self) -> None:
        if not self._pending_imports:
            self.importing_changed.emit(False)
            return

        source = self._pending_imports.popleft()
        logger.info("Importing %s", source)
        self.import_started.emit(str(source))

        self._import_thread = QThread()
        self._import_worker = ImportWorker(
            source, self._storage_dir, prober=self._prober, thumbnailer=self._thumbnailer
        )
        self._import_worker.moveToThread(self._import_thread)
        self._import_thread.started.connect(self._import_worker.run)

        # Delivered on this object's thread (queued across threads)
        self._import_worker.finished.connect(self._on_import_prepared)
        self._import_worker.error.connect(self._on_import_error)

        self._import_worker.finished.connect(self._import_thread.quit)
        self._import_worker.error.connect(self._import_thread.quit)

        self._import_thread.start()

    @Slot(object)
    def _on_import_prepared(self, record: VideoRecord) -> None:
        record.date_added = self._clock()
        try:
            committed = self._commit_import(record)
        except VideoImportError as e:
            logger.error("Import failed: %s", e)
            self.import_failed.emit(str(e))
        else:
            self.import_finished.emit(committed)
        self._finish_current_import()

    @Slot(str)
    def _on_import_error(self, message: str) -> None:
        logger.error("Import failed: %s", message)
        self.import_failed.emit(message)
        self._finish_current_import()

    def _finish_current_import(self) -> None:
        thread = self._import_thread
        self._import_thread = None
        self._import_worker = None
        if thread is not None:
            thread.quit()
            thread.wait()
        self._start_next_import()

    def _commit_import(self, record: VideoRecord) -> VideoRecord:
        self._repository.insert(record)
        try:
            self._repository.save()
        except PersistenceError as e:
            self._repository.delete(record.video_id)
            managed_storage.remove_file(record.file_path)
            raise VideoImportError(f"Could not save {record.title}: {e}") from e
        logger.info("Imported %s (%s)", record.title, record.video_id)
        self._publish()
        return record

    # ------------------------------------------------------------------ Mutations

    def delete_video(self, video_id: str) -> bool:
        """Remove the record and (best effort) its file. Returns False if unknown."""
        record = self._repository.get(video_id)
        if record is None:
            logger.warning("delete_video: unknown id %s", video_id)
            return False
        managed_storage.remove_file(record.file_path)
        self._repository.delete(video_id)
        self._persist()
        self._publish()
        return True

    def rename_video(self, video_id: str, new_title: str) -> bool:
        """Set a new title. Empty titles are ignored."""
        if not new_title or not new_title.strip():
            return False
        record = self._repository.get(video_id)
        if record is None:
            return False
        record.title = new_title
        self._update(record)
        return True

    def set_favorite(self, video_id: str, value: bool) -> bool:
        record = self._repository.get(video_id)
        if record is None:
            return False
        record.is_favorite = bool(value)
        self._update(record)
        return True

    def toggle_favorite(self, video_id: str) -> bool:
        """Flip the favorite flag. Returns the new state."""
        record = self._repository.get(video_id)
        if record is None:
            return False
        new_state = not record.is_favorite
        self.set_favorite(video_id, new_state)
        return new_state

    def record_playback_position(self, video_id: str, position_sec: float) -> None:
        """Persist the last position without republishing the collection."""
        record = self._repository.get(video_id)
        if record is None:
            return
        record.last_position_sec = record.clamp_position(position_sec)
        self._repository.update(record)
        self._persist()

    def record_view_start(self, video_id: str) -> None:
        record = self._repository.get(video_id)
        if record is None:
            return
        record.view_count += 1
        record.last_watched = self._clock()
        self._update(record)

    # ------------------------------------------------------------------ Lifecycle

    def shutdown(self) -> None:
        """Drop queued imports and wait for the running one to stop."""
        self._pending_imports.clear()
        thread = self._import_thread
        if thread is not None and thread.isRunning():
            thread.quit()
            thread.wait()

    # ------------------------------------------------------------------ Internals

    def _update(self, record: VideoRecord) -> None:
        self._repository.update(record)
        self._persist()
        self._publish()

    def _persist(self) -> bool:
        try:
            self._repository.save()
            return True
        except PersistenceError as e:
            # Memory and disk may now disagree until the next reload()
            logger.error("%s", e)
            return False

    def _publish(self) -> None:
        self.videos_changed.emit(self._repository.fetch_all())
