"""Search service orchestration layer.

Holds the live index snapshot for the request handlers. The snapshot is
never mutated; a rebuild is published by swapping the whole reference.
"""

from __future__ import annotations

import logging
from pathlib import Path
import time

from site_search.observability.tracing import create_span
from site_search.search.engine import DEFAULT_RESULT_LIMIT, QueryEngine
from site_search.search.indexer import IndexBuildResult, SiteIndexer
from site_search.search.storage import InvertedIndex


logger = logging.getLogger(__name__)


class SearchService:
    """High-level search API used by the HTTP layer."""

    def __init__(
        self,
        index: InvertedIndex,
        *,
        engine: QueryEngine | None = None,
        result_limit: int = DEFAULT_RESULT_LIMIT,
    ) -> None:
        self._index = index
        self.engine = engine or QueryEngine()
        self.result_limit = result_limit

    @property
    def index(self) -> InvertedIndex:
        return self._index

    def replace_index(self, index: InvertedIndex) -> InvertedIndex:
        """Publish a new snapshot and return the previous one."""
        previous, self._index = self._index, index
        logger.info("Index snapshot replaced (%d -> %d documents)", previous.doc_count, index.doc_count)
        return previous

    def search(self, raw_query: str) -> list[tuple[str, str]]:
        """Return ranked ``(title, url)`` pairs for ``raw_query``."""
        index = self._index
        started = time.perf_counter()
        with create_span("search.query", attributes={"search.query_length": len(raw_query)}) as span:
            results = self.engine.search(index, raw_query, limit=self.result_limit)
            span.set_attribute("search.result_count", len(results))
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "Search for %r returned %d results in %.2fms",
            raw_query,
            len(results),
            elapsed_ms,
            extra={"query_length": len(raw_query), "result_count": len(results), "elapsed_ms": round(elapsed_ms, 2)},
        )
        return results


def build_site_index(root: str | Path) -> IndexBuildResult:
    """Run a traced, blocking index build for ``root``."""
    with create_span("index.build", attributes={"site.root": str(root)}) as span:
        result = SiteIndexer(root).build()
        span.set_attribute("index.documents", result.documents_indexed)
        span.set_attribute("index.skipped", result.documents_skipped)
    return result
