"""Data models for mediashelf."""

from mediashelf.models.config import OverwritePolicy, ShelfConfig
from mediashelf.models.media import (
    FILTER_FLAGS,
    REQUIRED_FIELDS,
    MediaRecord,
    MediaType,
    audio,
    document,
    image,
    video,
)
from mediashelf.models.metadata import Metadata, metadata_from_mapping

__all__ = [
    # Media models
    "Metadata",
    "MediaRecord",
    "MediaType",
    "FILTER_FLAGS",
    "REQUIRED_FIELDS",
    "document",
    "audio",
    "image",
    "video",
    "metadata_from_mapping",
    # Config
    "ShelfConfig",
    "OverwritePolicy",
]
