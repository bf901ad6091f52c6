"""Import and export of media records as JSON.

The interchange format is a JSON array of entries::

    [{"fullpath": "...", "type": "image", "metadata": {"creator": "..."}}]

Entry metadata carries only domain fields. The synthetic type tags used
by the in-memory indexes are never written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from mediashelf.errors import DestinationExists, ExportError, InvalidFilepath
from mediashelf.library import Library
from mediashelf.models.config import OverwritePolicy, ShelfConfig
from mediashelf.models.media import MediaRecord
from mediashelf.models.metadata import metadata_from_mapping
from mediashelf.validator import (
    compute_presence,
    explain_invalid,
    validate_basic,
    validate_metadata,
)

logger = logging.getLogger(__name__)

NOTES_KEY = "notes"


def resolve_path(raw: str | Path) -> Path:
    """Resolve a user-supplied path.

    ``~`` and ``~/``-prefixed paths are joined onto the home directory,
    bare names (no ``/``) onto the current directory, and anything else
    (including ``~user/...``) is used as-is.
    """
    text = str(raw)
    if text == "~":
        return Path.home()
    if text.startswith("~/"):
        return Path.home() / text[2:]
    if text.startswith("~"):
        return Path(text)
    if "/" not in text:
        return Path.cwd() / text
    return Path(text)


def filename_from_path(fullpath: str) -> str:
    """Last non-empty ``/``-separated segment of a path."""
    pieces = [piece for piece in fullpath.split("/") if piece]
    return pieces[-1] if pieces else fullpath


class MediaEntry(BaseModel):
    """One object of the JSON interchange array."""

    fullpath: str = Field(default="")
    type: str = Field(default="")
    metadata: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: MediaRecord) -> "MediaEntry":
        metadata = record.exportable_metadata()
        if record.notes is not None:
            metadata[NOTES_KEY] = record.notes
        return cls(fullpath=record.path, type=record.type.value, metadata=metadata)

    def to_record(self) -> MediaRecord:
        """Build the typed record. The entry must already be valid."""
        metadata = dict(self.metadata)
        notes = metadata.pop(NOTES_KEY, None)
        return MediaRecord.create(
            self.type,
            filename_from_path(self.fullpath),
            self.fullpath,
            metadata_from_mapping(metadata),
            notes=notes,
        )


_ENTRIES = TypeAdapter(list[MediaEntry])


@dataclass
class RejectedEntry:
    """An entry skipped during import, with the reasons it was invalid."""

    fullpath: str
    type: str
    reasons: list[str]


@dataclass
class ImportReport:
    """Outcome of reading one interchange file."""

    source: Path
    accepted: list[MediaRecord] = field(default_factory=list)
    rejected: list[RejectedEntry] = field(default_factory=list)
    error: str | None = None  # Set when the file itself could not be decoded

    @property
    def ok(self) -> bool:
        return self.error is None and not self.rejected


@dataclass
class ExportReport:
    """Outcome of writing one interchange file."""

    target: Path
    written: int = 0
    skipped: list[str] = field(default_factory=list)


class ImportExportManager:
    """Reads interchange files into a library and writes records back out."""

    def __init__(self, library: Library, config: ShelfConfig | None = None) -> None:
        self.library = library
        self.config = config or ShelfConfig()

    def read(self, path: str | Path) -> list[MediaRecord]:
        """Import a file into the library.

        Raises:
            InvalidFilepath: the resolved path does not exist.

        Returns:
            The accepted records, sorted by filename.
        """
        return self.read_report(path).accepted

    def read_report(self, path: str | Path) -> ImportReport:
        """Import a file and report both accepted and rejected entries."""
        source = resolve_path(path)
        if not source.exists():
            raise InvalidFilepath(source)

        report = ImportReport(source=source)
        try:
            entries = _ENTRIES.validate_json(source.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error(f"Issue with {source}: {e}")
            report.error = f"could not be decoded as a list of media entries ({type(e).__name__})"
            return report

        for entry in entries:
            checks = compute_presence(entry.metadata)
            if validate_basic(entry.fullpath, entry.type) and validate_metadata(
                entry.type, checks
            ):
                record = entry.to_record()
                self.library.add(record)
                report.accepted.append(record)
                continue

            reasons = explain_invalid(entry.fullpath, entry.type, checks)
            report.rejected.append(RejectedEntry(entry.fullpath, entry.type, reasons))

        report.accepted.sort(key=lambda record: record.filename)
        self._log_report(path, report)
        return report

    def _log_report(self, path: str | Path, report: ImportReport) -> None:
        if report.rejected:
            logger.warning(f"Files not successfully imported for {path}:")
        for rejected in report.rejected:
            label = rejected.fullpath or "Entry without a path (not added to the library)"
            logger.warning(f"  {label}: {'; '.join(rejected.reasons)}")
        logger.info(f"Imported {len(report.accepted)} files from {report.source}")

    def write(
        self,
        path: str | Path,
        records: Iterable[MediaRecord],
        overwrite: OverwritePolicy | str | None = None,
    ) -> Path:
        """Export records to a JSON file.

        Records that are no longer valid are skipped with a warning.

        Args:
            path: Destination, resolved like import paths
            records: Records to write
            overwrite: Policy for an existing destination (defaults to config)

        Returns:
            The path actually written.

        Raises:
            DestinationExists: the target exists and the policy is ``fail``.
            ExportError: the document could not be encoded or written.
        """
        return self.write_report(path, records, overwrite).target

    def write_report(
        self,
        path: str | Path,
        records: Iterable[MediaRecord],
        overwrite: OverwritePolicy | str | None = None,
    ) -> ExportReport:
        """Export records and report how many were written and which were skipped."""
        policy = OverwritePolicy(overwrite) if overwrite is not None else self.config.overwrite

        entries: list[MediaEntry] = []
        skipped: list[str] = []
        for record in records:
            checks = compute_presence(record)
            if not (
                validate_basic(record.path, record.type)
                and validate_metadata(record.type, checks)
            ):
                reasons = explain_invalid(record.path, record.type.value, checks)
                logger.warning(f"Not exporting {record.filename}: {'; '.join(reasons)}")
                skipped.append(record.filename)
                continue
            entries.append(MediaEntry.from_record(record))

        try:
            payload = json.dumps(
                [entry.model_dump() for entry in entries],
                indent=self.config.json_indent,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as e:
            raise ExportError(f"Could not encode export data: {e}") from e

        target = self._destination(resolve_path(path), policy)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Could not write {target}: {e}") from e

        logger.info(f"Saved {len(entries)} files to {target}")
        return ExportReport(target=target, written=len(entries), skipped=skipped)

    @staticmethod
    def _destination(target: Path, policy: OverwritePolicy) -> Path:
        if not target.exists() or policy == OverwritePolicy.OVERWRITE:
            return target
        if policy == OverwritePolicy.FAIL:
            raise DestinationExists(target)

        counter = 1
        while True:
            candidate = target.with_name(f"{target.stem}-{counter}{target.suffix}")
            if not candidate.exists():
                return candidate
            counter += 1
