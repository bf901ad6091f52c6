"""Inverted index from metadata tokens to media records."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from mediashelf.models.media import MediaRecord


class InvertedIndex:
    """Maps a token (a keyword or a value) to the records that carry it.

    Buckets keep insertion order and hold each record object at most once.
    Removal by record uses structural equality. Nothing is pruned when a
    record's metadata changes; callers decide when to drop tokens or records.
    """

    def __init__(self) -> None:
        self._buckets: defaultdict[str, list[MediaRecord]] = defaultdict(list)
        # id() of every record per bucket, for constant-time membership
        self._members: defaultdict[str, set[int]] = defaultdict(set)

    def add(self, token: str, record: MediaRecord) -> None:
        """Append a record to the token's bucket, creating it if needed."""
        members = self._members[token]
        if id(record) not in members:
            members.add(id(record))
            self._buckets[token].append(record)

    def add_all(self, tokens: list[str], record: MediaRecord) -> None:
        for token in tokens:
            self.add(token, record)

    def get(self, token: str) -> list[MediaRecord]:
        """Records for a token (exact match), in insertion order."""
        bucket = self._buckets.get(token)
        return list(bucket) if bucket else []

    def drop(self, token: str) -> list[MediaRecord]:
        """Remove a whole bucket. Returns the records it held."""
        self._members.pop(token, None)
        return self._buckets.pop(token, [])

    def discard(self, record: MediaRecord) -> int:
        """Remove a record from every bucket. Returns how many buckets held it."""
        removed = 0
        for token in list(self._buckets):
            bucket = self._buckets[token]
            kept = [r for r in bucket if r != record]
            if len(kept) != len(bucket):
                removed += 1
                if kept:
                    self._buckets[token] = kept
                    self._members[token] = {id(r) for r in kept}
                else:
                    del self._buckets[token]
                    self._members.pop(token, None)
        return removed

    def clear(self) -> None:
        self._buckets.clear()
        self._members.clear()

    def tokens(self) -> list[str]:
        return sorted(self._buckets)

    def __contains__(self, token: object) -> bool:
        return token in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)
