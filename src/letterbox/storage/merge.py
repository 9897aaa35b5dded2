"""Sparse patch merge for the settings cache."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from letterbox.documents import CACHE_FIELDS, SettingsCache


def merge_cache(current: SettingsCache, patch: Any) -> SettingsCache:
    """Return the next cache version after applying *patch* to *current*.

    Every known field the patch mentions takes the patched value; a value
    that is not a string (null included) clears the field. Fields the patch
    does not mention keep their current value. Unknown keys are ignored and
    a non-mapping patch changes nothing. *current* is never mutated.
    """
    if not isinstance(patch, Mapping):
        return replace(current)

    changes: dict[str, str | None] = {}
    for key in CACHE_FIELDS:
        if key in patch:
            value = patch[key]
            changes[key] = value if isinstance(value, str) else None
    return replace(current, **changes)
