"""Core media record models."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field, model_validator

from mediashelf.errors import (
    CannotRemoveCreator,
    CannotRemoveResolution,
    CannotRemoveRuntime,
    ProtectedFieldError,
)
from mediashelf.models.metadata import Metadata

CREATOR = "creator"
RESOLUTION = "resolution"
RUNTIME = "runtime"

# Fields whose presence is validated and whose removal is guarded
TRACKED_FIELDS = (CREATOR, RESOLUTION, RUNTIME)


class MediaType(str, Enum):
    """Kind of media record."""

    DOCUMENT = "document"
    AUDIO = "audio"
    IMAGE = "image"
    VIDEO = "video"

    @property
    def flag(self) -> str:
        """Short filter flag used as the synthetic tag keyword."""
        return FILTER_FLAGS[self]

    @property
    def tag(self) -> Metadata:
        """Synthetic metadata entry that lets filters reuse keyword search."""
        return Metadata(self.flag, self.value)

    @property
    def required_fields(self) -> frozenset[str]:
        return REQUIRED_FIELDS[self]

    @classmethod
    def from_flag(cls, flag: str) -> "MediaType | None":
        for media_type, media_flag in FILTER_FLAGS.items():
            if media_flag == flag:
                return media_type
        return None


FILTER_FLAGS: dict[MediaType, str] = {
    MediaType.DOCUMENT: "-d",
    MediaType.AUDIO: "-a",
    MediaType.IMAGE: "-i",
    MediaType.VIDEO: "-v",
}

REQUIRED_FIELDS: dict[MediaType, frozenset[str]] = {
    MediaType.DOCUMENT: frozenset({CREATOR}),
    MediaType.AUDIO: frozenset({CREATOR, RUNTIME}),
    MediaType.IMAGE: frozenset({CREATOR, RESOLUTION}),
    MediaType.VIDEO: frozenset({CREATOR, RESOLUTION, RUNTIME}),
}

# Checked in this order when removing by keyword
_PROTECTED: tuple[tuple[str, frozenset[MediaType], type[ProtectedFieldError]], ...] = (
    (RUNTIME, frozenset({MediaType.AUDIO, MediaType.VIDEO}), CannotRemoveRuntime),
    (RESOLUTION, frozenset({MediaType.IMAGE, MediaType.VIDEO}), CannotRemoveResolution),
    (CREATOR, frozenset(MediaType), CannotRemoveCreator),
)

FLAG_KEYWORDS = frozenset(FILTER_FLAGS.values())


class MediaRecord(BaseModel):
    """A media file in the library (document, audio, image or video).

    The metadata list is kept sorted by keyword and always carries exactly
    one synthetic type tag (``-d``, ``-a``, ``-i`` or ``-v``). Equality is
    structural over filename, path, type and the metadata sequence.
    """

    filename: str = Field(..., description="Display name (last path segment)")
    path: str = Field(..., description="Path given at import time")
    type: MediaType = Field(..., description="Media kind")
    metadata: list[Metadata] = Field(default_factory=list)
    notes: str | None = Field(default=None, description="Free-text notes")

    @model_validator(mode="after")
    def _tag_and_sort(self) -> "MediaRecord":
        tag = self.type.tag
        if tag not in self.metadata:
            self.metadata.append(tag)
        self._sort()
        return self

    @classmethod
    def create(
        cls,
        media_type: MediaType | str,
        filename: str,
        path: str,
        metadata: Iterable[Metadata] = (),
        notes: str | None = None,
    ) -> "MediaRecord":
        """Build a record of the given kind."""
        return cls(
            filename=filename,
            path=path,
            type=MediaType(media_type),
            metadata=list(metadata),
            notes=notes,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MediaRecord):
            return NotImplemented
        return (
            self.filename == other.filename
            and self.path == other.path
            and self.type == other.type
            and self.metadata == other.metadata
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.filename

    def _sort(self) -> None:
        self.metadata.sort(key=lambda data: data.keyword)

    def _first_value(self, keyword: str) -> str | None:
        for data in self.metadata:
            if data.keyword == keyword:
                return data.value
        return None

    @property
    def creator(self) -> str | None:
        return self._first_value(CREATOR)

    @property
    def resolution(self) -> str | None:
        return self._first_value(RESOLUTION)

    @property
    def runtime(self) -> str | None:
        return self._first_value(RUNTIME)

    @property
    def keywords(self) -> list[str]:
        return [data.keyword for data in self.metadata]

    @property
    def values(self) -> list[str]:
        return [data.value for data in self.metadata]

    def add_metadata(self, data: Metadata) -> None:
        """Append a metadata entry and restore keyword order."""
        self.metadata.append(data)
        self._sort()

    def has_metadata(self, data: Metadata | str) -> bool:
        """Check for an exact entry, or for a keyword when given a string."""
        if isinstance(data, str):
            return self.has_key(data)
        return data in self.metadata

    def has_key(self, key: str) -> bool:
        """Case-insensitive substring match against every keyword.

        ``"date"`` matches ``"dateCreated"``.
        """
        needle = key.lower()
        return any(needle in data.keyword.lower() for data in self.metadata)

    def remove_metadata(self, data: Metadata) -> None:
        """Remove the first entry equal to ``data``, if any."""
        try:
            self.metadata.remove(data)
        except ValueError:
            pass

    def remove_key(self, key: str) -> bool:
        """Remove the first entry whose keyword matches ``key`` (ignoring case).

        Raises:
            ProtectedFieldError: the key is required for this record's type.

        Returns:
            True if an entry was removed.
        """
        lowered = key.lower()
        for field, types, error in _PROTECTED:
            if lowered == field and self.type in types:
                raise error(self.filename, self.type.value)

        for index, data in enumerate(self.metadata):
            if data.keyword.lower() == lowered:
                del self.metadata[index]
                return True
        return False

    def set_metadata(self, key: str, value: str) -> None:
        """Replace the entry for ``key`` (a remove followed by an add)."""
        self.remove_key(key)
        self.add_metadata(Metadata(key, value))

    def exportable_metadata(self) -> dict[str, str]:
        """Metadata as a mapping, without the synthetic type tags."""
        return {
            data.keyword: data.value
            for data in self.metadata
            if data.keyword not in FLAG_KEYWORDS
        }


def document(filename: str, path: str, metadata: Iterable[Metadata] = ()) -> MediaRecord:
    return MediaRecord.create(MediaType.DOCUMENT, filename, path, metadata)


def audio(filename: str, path: str, metadata: Iterable[Metadata] = ()) -> MediaRecord:
    return MediaRecord.create(MediaType.AUDIO, filename, path, metadata)


def image(filename: str, path: str, metadata: Iterable[Metadata] = ()) -> MediaRecord:
    return MediaRecord.create(MediaType.IMAGE, filename, path, metadata)


def video(filename: str, path: str, metadata: Iterable[Metadata] = ()) -> MediaRecord:
    return MediaRecord.create(MediaType.VIDEO, filename, path, metadata)
