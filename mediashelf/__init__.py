"""mediashelf - In-memory media metadata library with JSON import/export."""

from mediashelf.interchange import ImportExportManager
from mediashelf.library import Library
from mediashelf.models.config import OverwritePolicy, ShelfConfig
from mediashelf.models.media import MediaRecord, MediaType
from mediashelf.models.metadata import Metadata
from mediashelf.validator import FileValidator, PresenceChecks

__version__ = "0.1.0"
__all__ = [
    "Library",
    "ImportExportManager",
    "MediaRecord",
    "MediaType",
    "Metadata",
    "FileValidator",
    "PresenceChecks",
    "ShelfConfig",
    "OverwritePolicy",
]
