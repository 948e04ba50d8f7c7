"""Search data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Posting:
    """A posting represents a term occurrence in a document.

    Frequency is derived from the number of positions.
    """

    doc_id: int
    positions: tuple[int, ...]

    @property
    def frequency(self) -> int:
        return len(self.positions)


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """Stored fields of one indexed document; ``doc_id`` is its insertion ordinal."""

    doc_id: int
    title: str
    url: str

    def as_pair(self) -> tuple[str, str]:
        return (self.title, self.url)


@dataclass(frozen=True, slots=True)
class RankedDocument:
    """Represents a scored document produced by the query engine."""

    doc_id: int
    score: float
