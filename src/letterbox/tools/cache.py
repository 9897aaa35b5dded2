"""Cache tools: load_cache, save_cache, clear_cache, update_cache."""
from pathlib import Path
from typing import Any

from fastmcp import FastMCP
from letterbox.documents import SettingsCache
from letterbox.errors import error, INVALID_ARGUMENT, IO_ERROR, LOCK_TIMEOUT
from letterbox.layout import ensure_layout
from letterbox.storage.codec import encode_document, load_document
from letterbox.storage.guarded import (
    DEFAULT_LOCK_SETTINGS,
    LockSettings,
    remove_document,
    update_document,
    write_document,
)
from letterbox.storage.locks import LockTimeout
from letterbox.storage.merge import merge_cache


def _read_cache(path: Path) -> SettingsCache:
    # corrupt cache content is recovered with defaults rather than surfaced
    return load_document(path, SettingsCache.from_dict, SettingsCache, tolerant=True)


def _encode_cache(cache: SettingsCache) -> bytes:
    return encode_document(cache.to_dict())


def load_cache(root: Path) -> SettingsCache:
    """Return the settings cache, or an all-empty cache if none is stored."""
    layout = ensure_layout(root)
    return _read_cache(layout.cache_path)


def save_cache(
    cache: SettingsCache,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> None:
    """Replace the stored cache wholesale, under the same lock as update_cache."""
    layout = ensure_layout(root)
    write_document(layout.cache_path, _encode_cache(cache), locks, shared=True)


def update_cache(
    patch: Any,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> SettingsCache:
    """Apply a sparse patch to the stored cache and return the committed cache.

    Only fields named in *patch* change; other fields keep whatever value is
    on disk at the moment the lock is held. Raises LockTimeout without
    touching the cache if the lock cannot be acquired in time.
    """
    layout = ensure_layout(root)
    return update_document(
        layout.cache_path,
        _read_cache,
        lambda current: merge_cache(current, patch),
        _encode_cache,
        locks,
        shared=True,
    )


def clear_cache(root: Path, locks: LockSettings = DEFAULT_LOCK_SETTINGS) -> bool:
    """Delete the stored cache. Returns True if a cache file existed."""
    layout = ensure_layout(root)
    return remove_document(layout.cache_path, locks, shared=True)


# --- FastMCP tool registration ---

def _register(mcp: FastMCP, root: Path, locks: LockSettings = DEFAULT_LOCK_SETTINGS) -> None:
    @mcp.tool()
    def load_cache_tool() -> dict | str:
        """Return the remembered selections of each view. Missing entries are null."""
        try:
            return load_cache(root).to_dict()
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def save_cache_tool(cache: dict) -> str:
        """Replace the whole settings cache. Fields left out are stored as null."""
        try:
            save_cache(SettingsCache.from_dict(cache), root, locks)
            return "Cache saved."
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def update_cache_tool(patch: dict) -> str:
        """Update only the named cache fields. A null value clears that field."""
        try:
            update_cache(patch, root, locks)
            return "Cache updated."
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def clear_cache_tool() -> str:
        """Delete the settings cache so every view starts with no remembered selection."""
        try:
            if clear_cache(root, locks):
                return "Cache cleared."
            return "Cache was already empty."
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))
