"""Search indexes for mediashelf."""

from mediashelf.search.indexer import InvertedIndex

__all__ = ["InvertedIndex"]
