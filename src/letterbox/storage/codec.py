"""JSON codec for documents: stable pretty encoding and absence-tolerant loading."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentDecodeError(ValueError):
    """A document exists on disk but its content could not be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Malformed document {path.name}: {reason}")
        self.path = path
        self.reason = reason


def encode_document(value: Any) -> bytes:
    """Serialize *value* to pretty-printed UTF-8 JSON with a trailing newline."""
    return (json.dumps(value, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def load_document(
    path: Path,
    decode: Callable[[Any], T],
    default: Callable[[], T],
    tolerant: bool = False,
) -> T:
    """Load and decode the JSON document at *path*.

    A missing file yields ``default()``; absence is not corruption. Content
    that fails to parse, or that *decode* rejects with ValueError, raises
    DocumentDecodeError unless *tolerant* is set, in which case the default
    is returned instead. Read failures other than absence propagate as OSError.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return default()

    try:
        return decode(json.loads(raw))
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        if tolerant:
            logger.warning("Discarding corrupt %s, using defaults: %s", path.name, e)
            return default()
        raise DocumentDecodeError(path, str(e)) from e
