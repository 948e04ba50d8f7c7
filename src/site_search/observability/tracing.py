"""OpenTelemetry tracing with ASGI middleware."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from site_search.observability.context import begin_request, end_request, set_span_id


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

SERVICE_NAME = "site-search"

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(service_name: str = SERVICE_NAME) -> TracerProvider:
    """Initialize OpenTelemetry tracing."""
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = trace.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def configure_trace_exporter(endpoint: str, provider: TracerProvider | None = None) -> bool:
    """Export spans to an OTLP/HTTP collector; returns False when disabled or failing."""
    if not endpoint:
        return False

    active_provider = provider or trace.get_tracer_provider()
    if not isinstance(active_provider, TracerProvider):
        active_provider = init_tracing()

    try:
        exporter = OTLPSpanExporter(endpoint=endpoint)
    except Exception as exc:
        logger.error("Failed to configure OTLP exporter: %s", exc, exc_info=True)
        return False

    active_provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info("OTLP trace export enabled to %s", endpoint)
    return True


def get_tracer() -> Tracer:
    """Get the configured tracer, falling back to the global provider."""
    tracer = _tracer_holder["tracer"]
    if tracer is None:
        tracer = trace.get_tracer(__name__)
        _tracer_holder["tracer"] = tracer
    return tracer


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span with context propagation."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        ctx = span.get_span_context()
        if ctx.is_valid:
            set_span_id(format(ctx.span_id, "016x"))

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise


class TraceContextMiddleware:
    """ASGI middleware binding a fresh ``RequestContext`` to every HTTP request.

    An incoming ``x-trace-id`` header is reused; otherwise each request gets
    its own new trace id.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict, receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        incoming = headers.get(b"x-trace-id", b"").decode("latin-1").strip()
        token = begin_request(scope.get("path", ""), trace_id=incoming or None)
        try:
            await self.app(scope, receive, send)
        finally:
            end_request(token)
