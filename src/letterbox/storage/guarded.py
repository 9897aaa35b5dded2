"""Single lock-guarded entry point for every document writer.

Writers never touch a final path directly: replace, read-modify-write and
delete all funnel through here, so a whole-document save cannot race a
concurrent patch of the same file.
"""
from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from letterbox.storage.atomic import commit, leftover_temps
from letterbox.storage.locks import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, hold

logger = logging.getLogger(__name__)

T = TypeVar("T")

# "all": every writer takes the per-document lock.
# "cache": only the shared settings cache is locked.
LOCK_SCOPES = ("all", "cache")


@dataclass(frozen=True)
class LockSettings:
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    scope: str = "all"

    def __post_init__(self) -> None:
        if self.scope not in LOCK_SCOPES:
            raise ValueError(f"Unknown lock scope {self.scope!r}")

    def applies_to(self, shared: bool) -> bool:
        """Whether writers of a document should lock. *shared* marks the cache."""
        return shared or self.scope == "all"


DEFAULT_LOCK_SETTINGS = LockSettings()


def _guard(path: Path, settings: LockSettings, shared: bool):
    if not settings.applies_to(shared):
        return nullcontext()
    return hold(path, timeout=settings.timeout, poll_interval=settings.poll_interval)


def write_document(
    path: Path,
    data: bytes,
    settings: LockSettings = DEFAULT_LOCK_SETTINGS,
    shared: bool = False,
) -> None:
    """Replace the document at *path* wholesale."""
    with _guard(path, settings, shared):
        commit(path, data)


def update_document(
    path: Path,
    load: Callable[[Path], T],
    mutate: Callable[[T], T],
    encode: Callable[[T], bytes],
    settings: LockSettings = DEFAULT_LOCK_SETTINGS,
    shared: bool = False,
) -> T:
    """Load, transform and commit the document at *path* under its lock.

    Returns the committed value. The lock is released on every exit path;
    a LockTimeout leaves the document untouched.
    """
    name = path.name
    logger.debug("%s: lock-wait", name)
    with _guard(path, settings, shared):
        current = load(path)
        logger.debug("%s: loaded", name)
        updated = mutate(current)
        logger.debug("%s: merged", name)
        commit(path, encode(updated))
        logger.debug("%s: committed", name)
    logger.debug("%s: released", name)
    return updated


def create_document(
    path: Path,
    data: bytes,
    settings: LockSettings = DEFAULT_LOCK_SETTINGS,
    shared: bool = False,
) -> None:
    """Write the document at *path* only if it does not exist yet.

    Raises FileExistsError otherwise. With the lock in effect, of two
    writers creating the same document exactly one succeeds.
    """
    with _guard(path, settings, shared):
        if path.exists():
            raise FileExistsError(f"{path.name} already exists")
        commit(path, data)


def remove_document(
    path: Path,
    settings: LockSettings = DEFAULT_LOCK_SETTINGS,
    shared: bool = False,
) -> bool:
    """Delete the document at *path*.

    Leftover temp files from interrupted writers are cleared too, but only
    while the lock is held: an unlocked writer may still own one.
    Returns True if the document existed.
    """
    locked = settings.applies_to(shared)
    with _guard(path, settings, shared):
        if locked:
            for leftover in leftover_temps(path):
                leftover.unlink(missing_ok=True)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
    return True
