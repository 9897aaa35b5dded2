"""Document types persisted under the base root, with their JSON shapes."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

CACHE_FIELDS = (
    "signature_view_last_selected_signature",
    "email_view_last_selected_signature",
    "email_view_last_selected_salutation",
    "email_view_last_selected_valediction",
)


@dataclass
class SettingsCache:
    """Last selection remembered by each UI surface. All fields optional."""
    signature_view_last_selected_signature: str | None = None
    email_view_last_selected_signature: str | None = None
    email_view_last_selected_salutation: str | None = None
    email_view_last_selected_valediction: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> SettingsCache:
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        values = {}
        for key in CACHE_FIELDS:
            value = raw.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"field {key!r} must be a string or null")
            values[key] = value
        return cls(**values)

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


@dataclass
class Location:
    name: str = ""
    address: str = ""


@dataclass
class SignatureProfile:
    signature_name: str
    name: str = ""
    position: str = ""
    department: str = ""
    company: str = ""
    location: Location = field(default_factory=Location)
    image_filename: str = ""

    @classmethod
    def from_dict(cls, raw: Any) -> SignatureProfile:
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        if not isinstance(raw.get("signature_name"), str):
            raise ValueError("missing string field 'signature_name'")

        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name == "location" or f.name not in raw:
                continue
            value = raw[f.name]
            if not isinstance(value, str):
                raise ValueError(f"field {f.name!r} must be a string")
            values[f.name] = value

        location_raw = raw.get("location", {})
        if not isinstance(location_raw, dict):
            raise ValueError("field 'location' must be an object")
        location_values: dict[str, str] = {}
        for f in fields(Location):
            if f.name not in location_raw:
                continue
            value = location_raw[f.name]
            if not isinstance(value, str):
                raise ValueError(f"field 'location.{f.name}' must be a string")
            location_values[f.name] = value
        return cls(location=Location(**location_values), **values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TemplateDocument:
    name: str
    content: str
    last_modified: str   # derived from file mtime, never stored


def normalize_favourites(raw: Any) -> list[str]:
    """Normalize decoded favourites data to an ordered list of identifiers.

    Accepts the current list form (non-string items dropped) and the legacy
    {"file.txt": true/false} mapping (only keys mapped to true are kept, in
    mapping order). Any other shape yields [].
    """
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, str)]
    if isinstance(raw, dict):
        return [key for key, member in raw.items() if member is True]
    return []


def normalize_word_list(raw: Any) -> list[str]:
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, str)]
    return []


def dedupe(items: list[str]) -> list[str]:
    """Drop repeated entries, keeping first-seen order."""
    return list(dict.fromkeys(items))
