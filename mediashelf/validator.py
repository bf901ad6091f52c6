"""Validity rules for media records and interchange entries.

A record is valid when it has a path, a legal type, and exactly the
tracked fields (creator, resolution, runtime) its type requires. A field
present beyond what the type requires makes the record invalid, so an
image carrying a runtime fails image validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from mediashelf.models.media import (
    CREATOR,
    REQUIRED_FIELDS,
    RESOLUTION,
    RUNTIME,
    TRACKED_FIELDS,
    MediaRecord,
    MediaType,
)
from mediashelf.models.metadata import Metadata

LEGAL_TYPES = frozenset(media_type.value for media_type in MediaType)


@dataclass(frozen=True)
class PresenceChecks:
    """Whether creator, resolution and runtime are present with a non-empty value."""

    creator: bool = False
    resolution: bool = False
    runtime: bool = False

    @classmethod
    def from_fields(cls, fields: Iterable[str]) -> "PresenceChecks":
        names = set(fields)
        return cls(
            creator=CREATOR in names,
            resolution=RESOLUTION in names,
            runtime=RUNTIME in names,
        )

    @property
    def present(self) -> frozenset[str]:
        return frozenset(name for name in TRACKED_FIELDS if getattr(self, name))


# Exact presence each type must match
VALID_PRESENCE: dict[MediaType, PresenceChecks] = {
    media_type: PresenceChecks.from_fields(fields)
    for media_type, fields in REQUIRED_FIELDS.items()
}


def _lookup_type(media_type: MediaType | str) -> MediaType | None:
    try:
        return MediaType(media_type)
    except ValueError:
        return None


def validate_basic(path: str, media_type: MediaType | str) -> bool:
    """Check that an entry has a path and a legal (case-insensitive) type."""
    value = getattr(media_type, "value", media_type)
    return bool(path) and bool(value) and value.lower() in LEGAL_TYPES


def required_fields_for(media_type: MediaType | str) -> frozenset[str]:
    resolved = _lookup_type(media_type)
    if resolved is None:
        return frozenset()
    return REQUIRED_FIELDS[resolved]


def validate_metadata(media_type: MediaType | str, checks: PresenceChecks) -> bool:
    """Check that presence matches the type's required fields exactly."""
    resolved = _lookup_type(media_type)
    if resolved is None:
        return False
    return checks == VALID_PRESENCE[resolved]


def compute_presence(
    source: MediaRecord | Iterable[Metadata] | Mapping[str, str],
) -> PresenceChecks:
    """Scan metadata for non-empty creator, resolution and runtime values."""
    if isinstance(source, MediaRecord):
        pairs: Iterable[tuple[str, str]] = (
            (data.keyword, data.value) for data in source.metadata
        )
    elif isinstance(source, Mapping):
        pairs = source.items()
    else:
        pairs = ((data.keyword, data.value) for data in source)

    found = {keyword.lower() for keyword, value in pairs if value}
    return PresenceChecks.from_fields(found)


def explain_invalid(path: str, media_type: str, checks: PresenceChecks) -> list[str]:
    """List the reasons an entry is invalid, in a stable order.

    Only call this for entries that failed validation; it never raises.
    """
    reasons: list[str] = []

    if not path:
        reasons.append("does not contain a fullpath")

    legal = bool(media_type) and media_type.lower() in LEGAL_TYPES
    if not media_type:
        reasons.append("does not contain a type - may be missing metadata")
    elif not legal:
        reasons.append(f'"{media_type}" is not a valid file type')
    elif media_type not in LEGAL_TYPES:
        reasons.append(f'"{media_type}" must be written in lower case')

    if not checks.creator:
        reasons.append("does not contain a creator")

    if legal:
        if media_type in ("image", "video") and not checks.resolution:
            reasons.append("does not contain a resolution")
        if media_type in ("audio", "video") and not checks.runtime:
            reasons.append("does not contain a runtime")

        allowed = required_fields_for(media_type.lower())
        for field in TRACKED_FIELDS:
            if field in checks.present and field not in allowed:
                reasons.append(f"contains a {field}, which {media_type} files do not carry")

    return reasons


class FileValidator:
    """Object facade over the validation rules, for collaborators that inject one."""

    validate_basic = staticmethod(validate_basic)
    required_fields_for = staticmethod(required_fields_for)
    validate_metadata = staticmethod(validate_metadata)
    compute_presence = staticmethod(compute_presence)
    explain_invalid = staticmethod(explain_invalid)

    def is_valid(self, record: MediaRecord) -> bool:
        """Full check of a record as it stands now."""
        return validate_basic(record.path, record.type.value) and validate_metadata(
            record.type, compute_presence(record)
        )
