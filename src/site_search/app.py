"""Main ASGI application entry point.

Routes:
    GET /search?q=<text>  ranked results rendered as HTML
    GET /...              static files under the site root

The index is built synchronously before the application object exists, so
the server never accepts a request without a complete snapshot.

Usage:
    site-search [ROOT] [--host HOST] [--port PORT]

    # Or configure through the environment
    SITE_SEARCH_ROOT=./public SITE_SEARCH_PORT=8080 python -m site_search
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import HTMLResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from .config import Settings
from .observability import TraceContextMiddleware, configure_logging, configure_trace_exporter, init_tracing
from .search.indexer import IndexBuildError
from .service_layer.search_service import SearchService, build_site_index
from .ui.results import render_search_page


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, service: SearchService | None = None) -> Starlette:
    """Create the ASGI application, building the index unless a service is given.

    Raises:
        IndexBuildError: The site root is missing or not a directory.
    """
    settings = settings or Settings()
    root = settings.resolved_root()

    if service is None:
        result = build_site_index(root)
        service = SearchService(
            result.index,
            result_limit=settings.result_limit,
        )

    async def search_endpoint(request: Request) -> HTMLResponse:
        query = request.query_params.get("q", "")
        results = request.app.state.search_service.search(query)
        return HTMLResponse(render_search_page(query, results))

    routes: list[Route | Mount] = [
        Route("/search", endpoint=search_endpoint, methods=["GET"]),
        Mount("/", app=StaticFiles(directory=root, html=True), name="static"),
    ]

    app = Starlette(
        debug=settings.log_level == "debug",
        routes=routes,
        middleware=[Middleware(TraceContextMiddleware)],
    )
    app.state.settings = settings
    app.state.search_service = service
    return app


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-search",
        description="Index a directory of HTML files and serve it with a /search endpoint.",
    )
    parser.add_argument("root", nargs="?", type=Path, help="Directory to index and serve (default: cwd)")
    parser.add_argument("--host", help="Listen address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Listen port (default: 3030)")
    parser.add_argument("--log-level", help="debug, info, warning, error or critical")
    parser.add_argument("--plain-logs", action="store_true", help="Human readable logs instead of JSON")
    return parser


def load_settings(argv: list[str] | None = None) -> Settings:
    """Merge command-line flags over environment configuration."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    overrides = {
        "root": args.root,
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
        "log_json": False if args.plain_logs else None,
    }
    try:
        return Settings(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as exc:
        parser.error(str(exc))
        raise  # unreachable: parser.error exits


def main(argv: list[str] | None = None) -> int:
    """Build the index, then serve until interrupted."""
    import uvicorn

    settings = load_settings(argv)
    configure_logging(settings.log_level, settings.log_json)
    init_tracing()
    configure_trace_exporter(settings.otlp_endpoint)

    logger.info("Building index for %s", settings.resolved_root())
    try:
        app = create_app(settings)
    except IndexBuildError as exc:
        logger.error("Index build failed, not starting server: %s", exc)
        return 1

    logger.info("Server running at %s:%d", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        log_config=None,  # keep our logging configuration
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
