"""Filesystem-backed indexing for a static site.

``SiteIndexer`` walks the site root, extracts the title/url fields of every
``.html`` file and feeds them to an ``IndexWriter``. Per-file failures are
logged and skipped so one unreadable page never aborts a build; a missing
root is fatal.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import time

from site_search.search.extraction import DocumentFields, extract
from site_search.search.schema import Schema, create_default_schema
from site_search.search.storage import IndexWriter, InvertedIndex, StorageError


logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"


class IndexBuildError(RuntimeError):
    """Raised when no index can be built at all (e.g. the root is missing)."""


class DocumentLoadError(Exception):
    """Raised when a single document cannot be read or decoded."""


@dataclass(frozen=True)
class IndexBuildResult:
    """Outcome of a site indexing run."""

    index: InvertedIndex
    documents_indexed: int
    documents_skipped: int
    errors: tuple[str, ...] = field(default_factory=tuple)
    duration_seconds: float = 0.0


def iter_html_files(root: Path) -> Iterator[Path]:
    """Yield ``.html`` files under ``root`` in a stable, sorted walk order.

    Symlinks are skipped, both directories and files: the static mount does
    not serve through them. Directories that cannot be listed are logged and
    skipped.
    """

    def _on_error(exc: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror or exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            if not filename.endswith(HTML_SUFFIX):
                continue
            path = Path(dirpath) / filename
            if path.is_symlink():
                logger.debug("Skipping symlinked document %s", path)
                continue
            yield path


def read_html(path: Path) -> str:
    """Read a document as UTF-8 text."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DocumentLoadError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentLoadError(f"Cannot decode {path} as UTF-8: {exc.reason}") from exc


class SiteIndexer:
    """Coordinate discovery, extraction and index construction for one root."""

    def __init__(self, root: str | Path, *, schema: Schema | None = None) -> None:
        self.root = Path(root)
        self.schema = schema or create_default_schema()

    def iter_documents(self) -> Iterator[DocumentFields | DocumentLoadError]:
        """Yield extracted fields per discovered file, or the load error for it."""
        for path in iter_html_files(self.root):
            try:
                content = read_html(path)
            except DocumentLoadError as exc:
                yield exc
                continue
            yield extract(path.relative_to(self.root), content)

    def build(self) -> IndexBuildResult:
        """Build a fresh index snapshot over the readable subset of the site."""

        if not self.root.exists():
            raise IndexBuildError(f"Site root does not exist: {self.root}")
        if not self.root.is_dir():
            raise IndexBuildError(f"Site root is not a directory: {self.root}")

        started = time.perf_counter()
        writer = IndexWriter(self.schema)
        documents_skipped = 0
        errors: list[str] = []

        for item in self.iter_documents():
            if isinstance(item, DocumentLoadError):
                logger.warning("Skipping document: %s", item)
                errors.append(str(item))
                documents_skipped += 1
                continue
            try:
                writer.add_document(item)
            except StorageError as exc:
                logger.warning("Failed to index %s: %s", item.url, exc)
                errors.append(f"{item.url}: {exc}")
                documents_skipped += 1

        index = writer.build()
        duration = time.perf_counter() - started
        if index.doc_count == 0:
            logger.warning("No HTML documents indexed under %s", self.root)
        logger.info(
            "Indexed %d documents under %s in %.3fs (%d skipped)",
            index.doc_count,
            self.root,
            duration,
            documents_skipped,
            extra={"documents_indexed": index.doc_count, "documents_skipped": documents_skipped},
        )
        return IndexBuildResult(
            index=index,
            documents_indexed=index.doc_count,
            documents_skipped=documents_skipped,
            errors=tuple(errors),
            duration_seconds=duration,
        )
