"""Observability module for OpenTelemetry-aligned tracing and logging."""

from site_search.observability.context import RequestContext, begin_request, current_request, end_request
from site_search.observability.logging import JsonFormatter, configure_logging
from site_search.observability.tracing import (
    TraceContextMiddleware,
    configure_trace_exporter,
    create_span,
    get_tracer,
    init_tracing,
)


__all__ = [
    "JsonFormatter",
    "RequestContext",
    "TraceContextMiddleware",
    "begin_request",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "current_request",
    "end_request",
    "get_tracer",
    "init_tracing",
]
