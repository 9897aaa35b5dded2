"""Base directory layout and filename hygiene shared across tools."""
import logging
from dataclasses import dataclass
from pathlib import Path

from fastmcp import FastMCP
from letterbox.errors import error, IO_ERROR

logger = logging.getLogger(__name__)

DATA_DIR = "data"
TEMPLATES_DIR = "Templates"
SIGNATURES_DIR = "Signatures"
IMAGES_DIR = "images"

UNTITLED = "Untitled"

_HOSTILE_CHARS = '/\\:*?"<>|'
_SANITIZE_TABLE = str.maketrans({c: "_" for c in _HOSTILE_CHARS})


@dataclass(frozen=True)
class Layout:
    root: Path

    @property
    def data_dir(self) -> Path:
        return self.root / DATA_DIR

    @property
    def templates_dir(self) -> Path:
        return self.root / TEMPLATES_DIR

    @property
    def signatures_dir(self) -> Path:
        return self.root / SIGNATURES_DIR

    @property
    def images_dir(self) -> Path:
        return self.signatures_dir / IMAGES_DIR

    @property
    def cache_path(self) -> Path:
        return self.data_dir / "cache.json"

    @property
    def locations_path(self) -> Path:
        return self.data_dir / "locations.json"

    @property
    def favourites_path(self) -> Path:
        return self.data_dir / "favourites.json"

    @property
    def salutations_path(self) -> Path:
        return self.data_dir / "salutations.json"

    @property
    def valedictions_path(self) -> Path:
        return self.data_dir / "valedictions.json"

    def signature_path(self, name: str) -> Path:
        return self.signatures_dir / f"{sanitize_filename(name)}.json"

    def template_path(self, name: str) -> Path:
        return self.templates_dir / f"{sanitize_filename(name)}.txt"

    def relative(self, path: Path) -> str:
        """Return *path* relative to the root, as a forward-slash string."""
        return path.relative_to(self.root).as_posix()


def ensure_layout(root: Path) -> Layout:
    """Create the full directory tree under *root* if missing. Safe to call repeatedly."""
    layout = Layout(root)
    for directory in (layout.data_dir, layout.templates_dir, layout.signatures_dir, layout.images_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return layout


def sanitize_filename(text: str) -> str:
    """Turn a user-supplied name into a safe file-system leaf name.

    Trims whitespace and replaces path-hostile characters with '_'. Empty or
    whitespace-only input maps to 'Untitled'.
    """
    stripped = text.strip()
    if not stripped:
        return UNTITLED
    return stripped.translate(_SANITIZE_TABLE)


def resolve_leaf(directory: Path, leaf: str) -> Path:
    """Resolve *leaf* inside *directory*.

    Raises ValueError if the result escapes the directory (traversal attempt).
    """
    base = directory.resolve()
    resolved = (base / leaf).resolve()
    if resolved == base or not resolved.is_relative_to(base):
        raise ValueError(f"Name {leaf!r} escapes {directory.name}/")
    return resolved


# --- FastMCP tool registration ---

def _register(mcp: FastMCP, root: Path) -> None:
    @mcp.tool()
    def ensure_layout_tool() -> str:
        """Create the base directory tree (data, Templates, Signatures, Signatures/images)."""
        try:
            ensure_layout(root)
            return f"Layout ready at `{root}`."
        except OSError as e:
            return error(IO_ERROR, str(e))
