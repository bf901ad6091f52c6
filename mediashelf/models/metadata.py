"""Keyword/value metadata attached to media records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Metadata(BaseModel):
    """A single keyword/value annotation.

    Instances are immutable and compare by value, so two entries with the
    same keyword and value are interchangeable. Edits replace the entry.
    """

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., description="Metadata keyword")
    value: str = Field(..., description="Metadata value")

    def __init__(self, keyword: str, value: str) -> None:
        super().__init__(keyword=keyword, value=value)

    def __str__(self) -> str:
        return f"{{{self.keyword} : {self.value}}}"

    def __repr__(self) -> str:
        return f"Metadata({self.keyword!r}, {self.value!r})"


def metadata_from_mapping(mapping: dict[str, str]) -> list[Metadata]:
    """Build metadata entries from a keyword -> value mapping."""
    return [Metadata(keyword, value) for keyword, value in mapping.items()]
