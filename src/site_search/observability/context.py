"""Per-request correlation data carried across async boundaries.

A ``RequestContext`` exists only while ``TraceContextMiddleware`` serves a
request. Code outside a request (startup, index builds) sees ``None``;
reading the context never creates one.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from uuid import uuid4


@dataclass(frozen=True)
class RequestContext:
    trace_id: str
    span_id: str
    path: str = ""


_current_request: ContextVar[RequestContext | None] = ContextVar("site_search_request", default=None)


def new_trace_id() -> str:
    """32-char hex trace id."""
    return uuid4().hex


def new_span_id() -> str:
    """16-char hex span id."""
    return uuid4().hex[:16]


def current_request() -> RequestContext | None:
    return _current_request.get()


def begin_request(path: str, trace_id: str | None = None) -> Token[RequestContext | None]:
    """Bind a fresh context for one request; pass the token to ``end_request``."""
    return _current_request.set(RequestContext(trace_id=trace_id or new_trace_id(), span_id=new_span_id(), path=path))


def end_request(token: Token[RequestContext | None]) -> None:
    _current_request.reset(token)


def set_span_id(span_id: str) -> None:
    """Point the active request at a new span; no-op outside a request."""
    ctx = _current_request.get()
    if ctx is not None:
        _current_request.set(replace(ctx, span_id=span_id))
