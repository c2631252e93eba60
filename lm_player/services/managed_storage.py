"""Managed storage: the app-private directory holding imported video files."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from lm_player.utils.config import MAX_NAME_COLLISIONS, VIDEO_DIR_NAME, get_app_dir

logger = logging.getLogger(__name__)


def default_storage_dir() -> Path:
    """Return the default managed video directory, creating it if needed."""
    storage = get_app_dir() / VIDEO_DIR_NAME
    storage.mkdir(parents=True, exist_ok=True)
    return storage


def _candidate_names(directory: Path, filename: str):
    """clip.mp4 -> clip.mp4, clip_1.mp4, clip_2.mp4, ..."""
    yield directory / filename
    stem = Path(filename).stem
    suffix = Path(filename).suffix
    for counter in range(1, MAX_NAME_COLLISIONS + 1):
        yield directory / f"{stem}_{counter}{suffix}"


def claim_destination(directory: Path, filename: str) -> Path:
    """Reserve a free path in *directory* for *filename* and return it.

    The name is claimed by creating an empty file exclusively; two callers
    asking for the same name always get different paths.
    Raises FileExistsError after MAX_NAME_COLLISIONS attempts.
    """
    for candidate in _candidate_names(directory, filename):
        try:
            with open(candidate, "xb"):
                pass
        except FileExistsError:
            continue
        return candidate

    raise FileExistsError(
        f"Could not find a free name for {filename} after {MAX_NAME_COLLISIONS} attempts"
    )


def copy_into(directory: Path, source: Path) -> Path:
    """Copy *source* into *directory* under a collision-free name.

    Returns the destination path. Never overwrites an existing file.
    """
    directory.mkdir(parents=True, exist_ok=True)
    dest = claim_destination(directory, source.name)
    try:
        with open(source, "rb") as src_file, open(dest, "wb") as dest_file:
            shutil.copyfileobj(src_file, dest_file)
        shutil.copystat(source, dest)
    except OSError:
        # Don't leave a truncated copy (or the empty claim) behind
        dest.unlink(missing_ok=True)
        raise
    logger.debug("Copied %s -> %s", source, dest)
    return dest


def remove_file(path: str | Path) -> bool:
    """Delete a managed file. Returns False (and logs) on failure."""
    path = Path(path)
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        logger.info("Managed file already gone: %s", path)
        return False
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
