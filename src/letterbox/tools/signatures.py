"""Signature tools: list, load, save, delete, rename, and image lookup."""
import base64
import logging
from pathlib import Path

from fastmcp import FastMCP
from letterbox.documents import SignatureProfile
from letterbox.errors import error, NOT_FOUND, IO_ERROR, LOCK_TIMEOUT, DECODE_ERROR, INVALID_ARGUMENT
from letterbox.layout import ensure_layout, resolve_leaf
from letterbox.storage.codec import DocumentDecodeError, encode_document, load_document
from letterbox.storage.guarded import (
    DEFAULT_LOCK_SETTINGS,
    LockSettings,
    create_document,
    remove_document,
    write_document,
)
from letterbox.storage.locks import LockTimeout

logger = logging.getLogger(__name__)


def _missing(name: str):
    def _raise() -> SignatureProfile:
        raise FileNotFoundError(f"Signature '{name}' not found")
    return _raise


def list_signatures(root: Path) -> list[str]:
    """Return the names of all stored signatures, sorted."""
    layout = ensure_layout(root)
    return sorted(p.stem for p in layout.signatures_dir.glob("*.json") if p.is_file())


def load_signature(name: str, root: Path) -> SignatureProfile:
    """Load a signature by name. Raises FileNotFoundError if absent."""
    layout = ensure_layout(root)
    return load_document(layout.signature_path(name), SignatureProfile.from_dict, _missing(name))


def list_signature_summaries(root: Path) -> list[dict]:
    """Return {signature_name, name} for every stored signature.

    Signatures that fail to decode are skipped with a warning so one bad file
    does not hide the rest of the list. Signatures deleted after the directory
    scan are skipped silently.
    """
    summaries = []
    for stem in list_signatures(root):
        try:
            sig = load_signature(stem, root)
        except FileNotFoundError:
            continue
        except DocumentDecodeError as e:
            logger.warning("Skipping unreadable signature %s: %s", stem, e)
            continue
        summaries.append({"signature_name": sig.signature_name, "name": sig.name})
    return summaries


def save_signature(
    signature: SignatureProfile,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> str:
    """Create or overwrite a signature. Returns its path relative to the root."""
    layout = ensure_layout(root)
    path = layout.signature_path(signature.signature_name)
    write_document(path, encode_document(signature.to_dict()), locks)
    return layout.relative(path)


def delete_signature(
    name: str,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> bool:
    """Delete a signature. Deleting one that does not exist is not an error.

    Returns True if a file was removed.
    """
    layout = ensure_layout(root)
    path = layout.signature_path(name)
    return remove_document(path, locks)


def rename_signature(
    old_name: str,
    new_name: str,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> str:
    """Rename a signature: create it under the new name, then delete the old file.

    The new file is only created if absent, checked under its lock, so two
    renames onto one name cannot both win. The create and the delete are not
    atomic together: a failure between them leaves both copies on disk, never
    neither. Returns the new relative path.
    """
    layout = ensure_layout(root)
    if not new_name.strip():
        raise ValueError("New signature name must not be empty")

    old_path = layout.signature_path(old_name)
    new_path = layout.signature_path(new_name)
    signature = load_signature(old_name, root)
    signature.signature_name = new_name

    if new_path == old_path:
        return save_signature(signature, root, locks)

    try:
        create_document(new_path, encode_document(signature.to_dict()), locks)
    except FileExistsError:
        raise FileExistsError(f"Signature '{new_name}' already exists") from None
    delete_signature(old_name, root, locks)
    return layout.relative(new_path)


def load_signature_image(filename: str, root: Path) -> str:
    """Return the named image from Signatures/images as base64 text."""
    layout = ensure_layout(root)
    path = resolve_leaf(layout.images_dir, filename)
    if not path.is_file():
        raise FileNotFoundError(f"Image file '{filename}' not found")
    return base64.b64encode(path.read_bytes()).decode("ascii")


# --- FastMCP tool registration ---

def _register(mcp: FastMCP, root: Path, locks: LockSettings = DEFAULT_LOCK_SETTINGS) -> None:
    @mcp.tool()
    def list_signatures_tool() -> list[str] | str:
        """List the names of all stored signatures."""
        try:
            return list_signatures(root)
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def list_signature_summaries_tool() -> list[dict] | str:
        """List every signature with its display name."""
        try:
            return list_signature_summaries(root)
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def load_signature_tool(name: str) -> dict | str:
        """Load one signature profile by name."""
        try:
            return load_signature(name, root).to_dict()
        except FileNotFoundError as e:
            return error(NOT_FOUND, str(e))
        except DocumentDecodeError as e:
            return error(DECODE_ERROR, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def save_signature_tool(signature: dict) -> str:
        """Create or overwrite a signature profile. Returns its stored path."""
        try:
            return save_signature(SignatureProfile.from_dict(signature), root, locks)
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def delete_signature_tool(name: str) -> str:
        """Delete a signature profile by name."""
        try:
            delete_signature(name, root, locks)
            return f"Deleted signature '{name}'."
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def rename_signature_tool(old_name: str, new_name: str) -> str:
        """Rename a signature profile. Returns the new stored path."""
        try:
            return rename_signature(old_name, new_name, root, locks)
        except FileNotFoundError as e:
            return error(NOT_FOUND, str(e))
        except FileExistsError as e:
            return error(INVALID_ARGUMENT, str(e))
        except DocumentDecodeError as e:
            return error(DECODE_ERROR, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def load_signature_image_tool(filename: str) -> str:
        """Return a signature image from Signatures/images as base64 text."""
        try:
            return load_signature_image(filename, root)
        except FileNotFoundError as e:
            return error(NOT_FOUND, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))
