"""Library - the in-memory store of media records and their indexes."""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right, insort
from typing import Iterable, Iterator, Sequence

from mediashelf.errors import ProtectedFieldError
from mediashelf.models.media import MediaRecord, MediaType
from mediashelf.models.metadata import Metadata
from mediashelf.search.indexer import InvertedIndex

logger = logging.getLogger(__name__)


def _filename(record: MediaRecord) -> str:
    return record.filename


def _by_filename(records: Iterable[MediaRecord]) -> list[MediaRecord]:
    return sorted(records, key=_filename)


def _unique(records: Iterable[MediaRecord]) -> list[MediaRecord]:
    """Drop repeats of the same record object, keeping first-seen order.

    Records held by a library are already structurally unique, so identity
    is enough here.
    """
    seen: set[int] = set()
    result: list[MediaRecord] = []
    for record in records:
        if id(record) not in seen:
            seen.add(id(record))
            result.append(record)
    return result


class Library:
    """Holds imported media records plus keyword and value inverted indexes.

    A library is owned by whoever creates it (a shell session, a script) and
    is passed to collaborators explicitly. It is single-writer and does no
    locking. Records are kept sorted by filename at all times.
    """

    def __init__(self, records: Iterable[MediaRecord] = ()) -> None:
        self._records: list[MediaRecord] = []
        self.key_index = InvertedIndex()
        self.value_index = InvertedIndex()
        for record in records:
            self.add(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record: object) -> bool:
        if not isinstance(record, MediaRecord):
            return False
        return record in self._named(record.filename)

    def __iter__(self) -> Iterator[MediaRecord]:
        return iter(self.all())

    def __repr__(self) -> str:
        return f"<Library: {len(self._records)} files>"

    def _named(self, filename: str) -> list[MediaRecord]:
        """Held records with this filename (a slice of the sorted list)."""
        lo = bisect_left(self._records, filename, key=_filename)
        hi = bisect_right(self._records, filename, lo=lo, key=_filename)
        return self._records[lo:hi]

    def all(self) -> list[MediaRecord]:
        """All records, sorted by filename."""
        return list(self._records)

    def add(self, record: MediaRecord) -> bool:
        """Add a record and index its keywords and values.

        Adding a record equal to one already held does nothing.

        Returns:
            True if the record was inserted.
        """
        if record in self:
            logger.debug(f"Skipping duplicate record {record.filename}")
            return False

        self.key_index.add_all(record.keywords, record)
        self.value_index.add_all(record.values, record)

        insort(self._records, record, key=_filename)
        return True

    def add_metadata(self, metadata: Metadata, record: MediaRecord) -> None:
        """Attach metadata to a record and index the new keyword and value.

        Index buckets only grow here; entries for earlier states are kept.
        """
        record.add_metadata(metadata)
        self.key_index.add(metadata.keyword, record)
        self.value_index.add(metadata.value, record)

    def set_metadata(self, record: MediaRecord, key: str, value: str) -> None:
        """Replace ``key`` on a record: a field removal followed by an add.

        A protected key is not removed (a warning is logged), so the new
        entry sits beside the old one.
        """
        self.remove_record_field(record, key)
        self.add_metadata(Metadata(key, value), record)

    def remove(self, metadata: Metadata) -> None:
        """Remove a metadata entry from every record holding it.

        The keyword's bucket is dropped from the key index. The value index
        is left as it is, so a value search can still return records that
        no longer carry the value.
        """
        for record in self.key_index.get(metadata.keyword):
            if record.has_metadata(metadata):
                record.remove_metadata(metadata)
        self.key_index.drop(metadata.keyword)

    def remove_record_field(self, record: MediaRecord, key: str) -> bool:
        """Remove a field from a record by keyword.

        Protected fields are reported as warnings and not raised.

        Returns:
            True if an entry was removed.
        """
        try:
            return record.remove_key(key)
        except ProtectedFieldError as e:
            logger.warning(str(e))
            return False

    def remove_record(self, record: MediaRecord) -> bool:
        """Drop a record from the library and from both indexes."""
        if record not in self:
            return False
        self._records.remove(record)
        self.key_index.discard(record)
        self.value_index.discard(record)
        return True

    def search(self, term: str | Metadata) -> list[MediaRecord]:
        """Records whose keyword or value equals ``term``.

        Keyword matches come first, then value matches not already listed.
        A Metadata argument is routed to :meth:`search_item`.
        """
        if isinstance(term, Metadata):
            return self.search_item(term)
        return _unique(self.key_index.get(term) + self.value_index.get(term))

    def search_item(self, item: Metadata) -> list[MediaRecord]:
        """Records matching the item's value but not its keyword."""
        by_keyword = self.search(item.keyword)
        return [record for record in self.search(item.value) if record not in by_keyword]

    def search_terms(self, terms: Iterable[str]) -> list[MediaRecord]:
        """Union of :meth:`search` over several terms, in first-seen order."""
        results: list[MediaRecord] = []
        for term in terms:
            results.extend(self.search(term))
        return _unique(results)

    def filter_by(self, terms: Sequence[str]) -> list[MediaRecord]:
        """Search within a category.

        Args:
            terms: A category flag (``-a``, ``-d``, ``-i`` or ``-v``) followed
                by zero or more search terms.

        Returns:
            With no terms, every record tagged with the flag. Otherwise,
            records matching any term whose keywords contain the category
            flag. Both are sorted by filename.
        """
        if not terms:
            raise ValueError("filter_by needs a category flag")

        category, rest = terms[0], list(terms[1:])
        if not rest:
            return _by_filename(self.search(category))

        matches = self.search_terms(rest)
        return _by_filename(record for record in matches if record.has_key(category))

    def clear(self) -> None:
        self._records.clear()
        self.key_index.clear()
        self.value_index.clear()

    def stats(self) -> dict[str, int]:
        """Record counts per media type, plus a total."""
        stats = {media_type.value: 0 for media_type in MediaType}
        for record in self._records:
            stats[record.type.value] += 1
        stats["total"] = len(self._records)
        return stats
