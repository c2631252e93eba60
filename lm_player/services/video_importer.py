"""Copy a video into managed storage and build its record."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from lm_player.models.video_record import VideoRecord
from lm_player.services import managed_storage
from lm_player.services.video_probe import ProbeError, VideoInfo, extract_thumbnail, probe_video

logger = logging.getLogger(__name__)

Prober = Callable[[Path], VideoInfo]
Thumbnailer = Callable[[Path], "bytes | None"]


class VideoImportError(Exception):
    """An import failed. The message is suitable for showing to the user."""


def new_video_id() -> str:
    return uuid.uuid4().hex


def prepare_import(
    source: str | Path,
    storage_dir: Path,
    prober: Prober = probe_video,
    thumbnailer: Thumbnailer = extract_thumbnail,
    now: datetime | None = None,
) -> VideoRecord:
    """Copy *source* into *storage_dir* and return a new, uncommitted record.

    The copy is removed again if anything after it fails, so a failed import
    never leaves an orphaned file in managed storage.

    Raises:
        VideoImportError: source unreadable, storage inaccessible, copy or probe failed.
    """
    source = Path(source)
    if not source.is_file():
        raise VideoImportError(f"File not found: {source}")

    try:
        storage_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise VideoImportError(f"Cannot access video storage {storage_dir}: {e}") from e

    try:
        dest = managed_storage.copy_into(storage_dir, source)
    except OSError as e:
        raise VideoImportError(f"Could not copy {source.name}: {e}") from e

    try:
        info = prober(dest)
        file_size = dest.stat().st_size
    except (ProbeError, OSError) as e:
        managed_storage.remove_file(dest)
        raise VideoImportError(f"Could not read video metadata for {source.name}: {e}") from e
    except Exception:
        managed_storage.remove_file(dest)
        raise

    try:
        thumbnail = thumbnailer(dest)
    except Exception as e:
        logger.info("No thumbnail for %s: %s", source.name, e)
        thumbnail = None

    return VideoRecord(
        video_id=new_video_id(),
        title=source.stem,
        file_path=str(dest),
        duration_sec=info.duration_sec,
        file_size=file_size,
        thumbnail_data=thumbnail,
        date_added=now or datetime.now(timezone.utc),
    )
