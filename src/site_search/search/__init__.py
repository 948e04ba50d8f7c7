"""
Embedded search stack for static HTML sites.

- analyzers: Tokenizers and filters
- schema: The two-field title/url schema and its postings channels
- extraction: Title/url extraction from HTML files
- storage: Index writer and the immutable inverted index
- stats: IDF and term weight helpers
- query: Query string grammar with plain-term fallback
- engine: Ranked top-K evaluation
- indexer: Filesystem discovery and index builds
"""

from site_search.search.engine import DEFAULT_RESULT_LIMIT, QueryEngine, search
from site_search.search.extraction import DocumentFields, extract
from site_search.search.indexer import IndexBuildError, IndexBuildResult, SiteIndexer
from site_search.search.storage import IndexWriter, InvertedIndex, StorageError, build_index


__all__ = [
    "DEFAULT_RESULT_LIMIT",
    "DocumentFields",
    "IndexBuildError",
    "IndexBuildResult",
    "IndexWriter",
    "InvertedIndex",
    "QueryEngine",
    "SiteIndexer",
    "StorageError",
    "build_index",
    "extract",
    "search",
]
