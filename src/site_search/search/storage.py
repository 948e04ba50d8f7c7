"""In-memory postings storage for the site search index.

* ``IndexWriter`` - accepts schema-aware documents and produces one immutable
  ``InvertedIndex``. A writer builds exactly once; it rejects documents after
  ``build()`` returns.
* ``InvertedIndex`` - read-only snapshot exposing postings, stored documents
  and field length metadata. It is shared between concurrent searches
  without locking, so every container it exposes is read-only.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Any

from site_search.search.analyzers import Analyzer
from site_search.search.models import Posting, StoredDocument
from site_search.search.schema import Channel, Schema, create_default_schema


logger = logging.getLogger(__name__)

DocumentInput = tuple[str, str] | Mapping[str, Any]


class StorageError(ValueError):
    """Raised when invalid documents or operations are encountered."""


@dataclass(frozen=True, slots=True)
class InvertedIndex:
    """Immutable inverted index over the documents of one build."""

    schema: Schema
    documents: tuple[StoredDocument, ...]
    postings: Mapping[str, Mapping[str, tuple[Posting, ...]]]
    field_lengths: Mapping[str, Mapping[int, int]]

    @property
    def doc_count(self) -> int:
        return len(self.documents)

    def get_document(self, doc_id: int) -> StoredDocument:
        return self.documents[doc_id]

    def get_postings(self, channel_key: str, term: str) -> tuple[Posting, ...]:
        """Return postings for a term in a channel, empty when unknown."""
        return self.postings.get(channel_key, {}).get(term, ())

    def vocabulary(self, channel_key: str) -> frozenset[str]:
        return frozenset(self.postings.get(channel_key, {}))

    def average_length(self, channel_key: str) -> float:
        lengths = self.field_lengths.get(channel_key, {})
        if not lengths:
            return 0.0
        return sum(lengths.values()) / len(lengths)


class IndexWriter:
    """Builds an ``InvertedIndex`` from title/url documents."""

    def __init__(self, schema: Schema | None = None) -> None:
        self.schema = schema or create_default_schema()
        self._analyzers: dict[str, Analyzer] = {channel.key: channel.analyzer() for channel in self.schema.channels}
        self._postings: defaultdict[str, defaultdict[str, dict[int, list[int]]]] = defaultdict(
            lambda: defaultdict(dict)
        )
        self._field_lengths: defaultdict[str, dict[int, int]] = defaultdict(dict)
        self._documents: list[StoredDocument] = []
        self._seen_urls: set[str] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._documents)

    def add_document(self, document: DocumentInput) -> int:
        """Index one document and return its ordinal ``doc_id``."""
        if self._closed:
            raise StorageError("Index writer is closed; start a new build to index more documents")

        title, url = _normalize_document(document)
        if url in self._seen_urls:
            msg = f"Duplicate document for unique field 'url': {url}"
            raise StorageError(msg)

        doc_id = len(self._documents)
        values = {"title": title, "url": url}
        for channel in self.schema.channels:
            self._index_value(channel, doc_id, values.get(channel.field_name, ""))

        self._documents.append(StoredDocument(doc_id=doc_id, title=title, url=url))
        self._seen_urls.add(url)
        return doc_id

    def build(self) -> InvertedIndex:
        """Freeze the collected postings into an index and close the writer."""
        if self._closed:
            raise StorageError("Index writer already built")
        self._closed = True

        postings: dict[str, Mapping[str, tuple[Posting, ...]]] = {}
        for channel in self.schema.channels:
            terms = self._postings.get(channel.key, {})
            postings[channel.key] = MappingProxyType(
                {
                    term: tuple(
                        Posting(doc_id=doc_id, positions=tuple(positions)) for doc_id, positions in doc_map.items()
                    )
                    for term, doc_map in terms.items()
                }
            )

        index = InvertedIndex(
            schema=self.schema,
            documents=tuple(self._documents),
            postings=MappingProxyType(postings),
            field_lengths=MappingProxyType(
                {key: MappingProxyType(dict(lengths)) for key, lengths in self._field_lengths.items()}
            ),
        )
        logger.debug(
            "Built index with %d documents and %d title terms",
            index.doc_count,
            len(postings.get("title", {})),
        )
        return index

    def _index_value(self, channel: Channel, doc_id: int, value: str) -> None:
        tokens = self._analyzers[channel.key](value)
        if not tokens:
            return
        self._field_lengths[channel.key][doc_id] = len(tokens)
        terms = self._postings[channel.key]
        for token in tokens:
            terms[token.text].setdefault(doc_id, []).append(token.position)


def _normalize_document(document: DocumentInput) -> tuple[str, str]:
    if isinstance(document, Mapping):
        if "url" not in document:
            raise StorageError("Document missing unique field 'url'")
        title = document.get("title")
        url = document["url"]
    else:
        try:
            title, url = document
        except (TypeError, ValueError) as exc:
            msg = f"Expected a (title, url) pair, got {document!r}"
            raise StorageError(msg) from exc

    if url is None or not str(url):
        raise StorageError("Unique field 'url' cannot be empty")
    return ("" if title is None else str(title), str(url))


def build_index(documents: Iterable[DocumentInput], *, schema: Schema | None = None) -> InvertedIndex:
    """Build an immutable index from ``(title, url)`` documents in order."""
    writer = IndexWriter(schema)
    for document in documents:
        writer.add_document(document)
    return writer.build()
