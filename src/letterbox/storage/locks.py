"""Advisory cross-process locks backed by exclusive marker files.

A lock on ``data/cache.json`` is the marker ``data/cache.json.lock``, created
with O_CREAT | O_EXCL. If the marker already exists another holder owns the
lock and the caller polls until the deadline. Works across processes as well
as across threads of the same process.

Waiters are not queued: whichever poll lands first after a release wins.
A marker left behind by a crashed process is never broken automatically; it
surfaces as LockTimeout until removed.
"""
from __future__ import annotations

import logging
import os
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 2.0
DEFAULT_POLL_INTERVAL = 0.02

LOCK_SUFFIX = ".lock"


class LockTimeout(TimeoutError):
    """The lock could not be acquired before the deadline."""

    def __init__(self, target: Path, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:g}s waiting for lock on {target.name}")
        self.target = target
        self.timeout = timeout


@dataclass
class LockHandle:
    target: Path
    marker: Path
    token: str


def marker_path(target: Path) -> Path:
    return target.with_name(target.name + LOCK_SUFFIX)


def acquire(
    target: Path,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> LockHandle:
    """Acquire the advisory lock protecting *target*.

    Raises LockTimeout if the marker is still held after *timeout* seconds.
    Any other OSError from creating the marker propagates immediately.
    """
    marker = marker_path(target)
    token = uuid.uuid4().hex
    deadline = time.monotonic() + timeout
    attempts = 0

    while True:
        try:
            fd = os.open(marker, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            attempts += 1
            if time.monotonic() >= deadline:
                logger.warning("Lock timeout on %s after %d attempts", marker, attempts)
                raise LockTimeout(target, timeout)
            time.sleep(poll_interval)
            continue

        try:
            os.write(fd, f"{os.getpid()} {token}\n".encode())
        finally:
            os.close(fd)
        if attempts:
            logger.debug("Acquired %s after %d waits", marker.name, attempts)
        return LockHandle(target=target, marker=marker, token=token)


def release(handle: LockHandle) -> None:
    """Delete the lock marker. Releasing an already-released lock is a no-op."""
    handle.marker.unlink(missing_ok=True)


@contextmanager
def hold(
    target: Path,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[LockHandle]:
    """Hold the lock on *target* for the duration of the block.

    The marker is removed on every exit path, including exceptions raised
    inside the block.
    """
    handle = acquire(target, timeout=timeout, poll_interval=poll_interval)
    try:
        yield handle
    finally:
        release(handle)
