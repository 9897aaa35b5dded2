"""Template tools: list_templates, load_template, save_template."""
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from fastmcp import FastMCP
from letterbox.documents import TemplateDocument
from letterbox.errors import error, NOT_FOUND, IO_ERROR, LOCK_TIMEOUT, DECODE_ERROR, INVALID_ARGUMENT
from letterbox.layout import ensure_layout
from letterbox.storage.codec import DocumentDecodeError
from letterbox.storage.guarded import DEFAULT_LOCK_SETTINGS, LockSettings, write_document
from letterbox.storage.locks import LockTimeout

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _read_template(path: Path) -> TemplateDocument:
    try:
        content = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentDecodeError(path, str(e)) from e
    modified = datetime.fromtimestamp(path.stat().st_mtime)
    return TemplateDocument(
        name=path.stem,
        content=content,
        last_modified=modified.strftime(_TIMESTAMP_FORMAT),
    )


def list_templates(root: Path) -> list[TemplateDocument]:
    """Return every .txt template with its content and last-modified time, sorted by name."""
    layout = ensure_layout(root)
    templates = []
    for path in sorted(p for p in layout.templates_dir.glob("*.txt") if p.is_file()):
        try:
            templates.append(_read_template(path))
        except FileNotFoundError:
            # deleted between the directory scan and the read
            continue
    return templates


def load_template(name: str, root: Path) -> TemplateDocument:
    """Load one template by name. Raises FileNotFoundError if absent."""
    layout = ensure_layout(root)
    path = layout.template_path(name)
    if not path.is_file():
        raise FileNotFoundError(f"Template '{name}' not found")
    return _read_template(path)


def save_template(
    name: str,
    content: str,
    root: Path,
    locks: LockSettings = DEFAULT_LOCK_SETTINGS,
) -> str:
    """Write a template under its sanitized name. Returns the relative path."""
    layout = ensure_layout(root)
    path = layout.template_path(name)
    write_document(path, content.encode("utf-8"), locks)
    return layout.relative(path)


# --- FastMCP tool registration ---

def _register(mcp: FastMCP, root: Path, locks: LockSettings = DEFAULT_LOCK_SETTINGS) -> None:
    @mcp.tool()
    def list_templates_tool() -> list[dict] | str:
        """List all templates with name, content and last_modified."""
        try:
            return [asdict(t) for t in list_templates(root)]
        except DocumentDecodeError as e:
            return error(DECODE_ERROR, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def load_template_tool(name: str) -> dict | str:
        """Load one template by name."""
        try:
            return asdict(load_template(name, root))
        except FileNotFoundError as e:
            return error(NOT_FOUND, str(e))
        except DocumentDecodeError as e:
            return error(DECODE_ERROR, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))

    @mcp.tool()
    def save_template_tool(name: str, content: str) -> str:
        """Save template text. Unsafe characters in the name are replaced with '_'."""
        try:
            return save_template(name, content, root, locks)
        except LockTimeout as e:
            return error(LOCK_TIMEOUT, str(e))
        except ValueError as e:
            return error(INVALID_ARGUMENT, str(e))
        except OSError as e:
            return error(IO_ERROR, str(e))
