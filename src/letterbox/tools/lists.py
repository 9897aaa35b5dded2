"""List tools: favourites, locations, salutations, valedictions."""
from pathlib import Path
from typing import Any

from fastmcp import FastMCP
from letterbox.documents import dedupe, normalize_favourites, normalize_word_list
from letterbox.errors import error, IO_ERROR, LOCK_TIMEOUT, DECODE_ERROR, INVALID_ARGUMENT
from letterbox.layout import ensure_layout
from letterbox.storage.codec import DocumentDecodeError, encode_document, load_document
from letterbox.storage.guarded import DEFAULT_LOCK_SETTINGS, LockSettings, update_document, write_document
from letterbox.storage.locks import LockTimeout


def _decode_locations(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ValueError(f"expected an object, got {type(raw).__name__}")
    bad = [k for k, v in raw.items() if not isinstance(v, str)]
    if bad:
        raise ValueError(f"address for {bad[0]!r} must be a string")
    return dict(raw)


def _read_favourites(path: Path) -> list[str]:
    return load_document(path, normalize_favourites, list)


def load_favourites(root: Path) -> list[str]:
    """Return favourite template names, accepting the legacy {name: bool} form."""
    layout = ensure_layout(root)
    return _read_favourites(layout.favourites_path)


def save_favourites(
    favourites: list[str],
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> list[str]:
    """Store favourites as a plain list, dropping repeats. Returns what was stored."""
    layout = ensure_layout(root)
    stored = dedupe(normalize_favourites(list(favourites)))
    write_document(layout.favourites_path, encode_document(stored), locks)
    return stored


def toggle_favourite(
    name: str,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> bool:
    """Add *name* to favourites, or remove it if already present.

    Returns True if *name* is a favourite afterwards.
    """
    layout = ensure_layout(root)

    def _toggle(current: list[str]) -> list[str]:
        current = dedupe(current)
        if name in current:
            return [f for f in current if f != name]
        return current + [name]

    updated = update_document(
        layout.favourites_path,
        _read_favourites,
        _toggle,
        encode_document,
        locks,
    )
    return name in updated


def load_locations(root: Path) -> dict[str, str]:
    """Return the location name -> address table. Read-only reference data."""
    layout = ensure_layout(root)
    return load_document(layout.locations_path, _decode_locations, dict)


def _load_word_list(path: Path) -> list[str]:
    return load_document(path, normalize_word_list, list)


def load_salutations(root: Path) -> list[str]:
    layout = ensure_layout(root)
    return _load_word_list(layout.salutations_path)


def load_valedictions(root: Path) -> list[str]:
    layout = ensure_layout(root)
    return _load_word_list(layout.valedictions_path)


# --- FastMCP tool registration ---

def _register(mcp: FastMCP, root: Path, locks: LockSettings = DEFAULT_LOCK_SETTINGS) -> None:
    def _read(loader):
        try:
            return loader(root)
        except DocumentDecodeError as e:
            return error(DECODE_ERROR, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def load_favourites_tool() -> list[str] | str:
        """Return the favourite template names."""
        return _read(load_favourites)

    @mcp.tool()
    def save_favourites_tool(favourites: list[str]) -> str:
        """Replace the favourite template names."""
        try:
            stored = save_favourites(favourites, root, locks)
            return f"Saved {len(stored)} favourites."
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def toggle_favourite_tool(name: str) -> str:
        """Mark a template as favourite, or unmark it if it already is one."""
        try:
            if toggle_favourite(name, root, locks):
                return f"'{name}' added to favourites."
            return f"'{name}' removed from favourites."
        except DocumentDecodeError as e:
            return error(DECODE_ERROR, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def load_locations_tool() -> dict[str, str] | str:
        """Return the location name to address table."""
        return _read(load_locations)

    @mcp.tool()
    def load_salutations_tool() -> list[str] | str:
        """Return the available salutations."""
        return _read(load_salutations)

    @mcp.tool()
    def load_valedictions_tool() -> list[str] | str:
        """Return the available valedictions."""
        return _read(load_valedictions)
