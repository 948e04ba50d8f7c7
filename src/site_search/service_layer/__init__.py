"""Service layer wiring the search index to request handlers."""

from site_search.service_layer.search_service import SearchService, build_site_index


__all__ = ["SearchService", "build_site_index"]
