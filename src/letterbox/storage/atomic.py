"""Atomic document commits via a sibling temp file and a single rename."""
import glob
import logging
import os
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"
_TOKEN_LEN = 12


def tmp_path(final_path: Path) -> Path:
    """Fresh sibling temp path for *final_path*: ``<name>.<token>.tmp``.

    Same directory, so same volume. Each call yields a new token, so
    concurrent writers of one document never share a temp file.
    """
    token = uuid.uuid4().hex[:_TOKEN_LEN]
    return final_path.with_name(f"{final_path.name}.{token}{TMP_SUFFIX}")


def leftover_temps(final_path: Path) -> list[Path]:
    """Temp files for *final_path* left behind by interrupted writers."""
    pattern = f"{glob.escape(final_path.name)}.{'?' * _TOKEN_LEN}{TMP_SUFFIX}"
    return sorted(final_path.parent.glob(pattern))


def _fsync_best_effort(fd: int, path: Path) -> None:
    try:
        os.fsync(fd)
    except OSError as e:
        logger.debug("fsync failed for %s (ignored): %s", path, e)


def commit(final_path: Path, data: bytes) -> None:
    """Write *data* to *final_path* atomically.

    The bytes go to a sibling temp file private to this call, which is
    flushed, fsynced (best effort) and then moved onto *final_path* with
    os.replace(). Readers of *final_path* see either the previous complete
    content or the new one. If anything fails before the rename, the temp
    file is removed and *final_path* is left untouched.
    """
    tmp = tmp_path(final_path)
    try:
        with open(tmp, "xb") as f:
            f.write(data)
            f.flush()
            _fsync_best_effort(f.fileno(), tmp)
        os.replace(tmp, final_path)
    except BaseException:
        try:
            tmp.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.debug("Could not remove temp file %s: %s", tmp, cleanup_error)
        raise
    logger.debug("Committed %s (%d bytes)", final_path.name, len(data))
