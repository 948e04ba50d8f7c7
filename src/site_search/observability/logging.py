"""Structured JSON log lines for the indexer and the search server."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import Any

import orjson

from site_search.observability.context import current_request


_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Request fields (``trace_id``, ``span_id``, ``path``) appear only for
    records emitted while a request is being served. ``extra=`` values are
    copied through, with long strings (raw queries, file paths) clipped.
    """

    MAX_MESSAGE_LEN = 2000
    MAX_EXTRA_LEN = 500

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _clip(record.getMessage(), self.MAX_MESSAGE_LEN),
        }

        request = current_request()
        if request is not None:
            entry["trace_id"] = request.trace_id
            entry["span_id"] = request.span_id
            entry["path"] = request.path

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            entry[key] = _clip(value, self.MAX_EXTRA_LEN) if isinstance(value, str) else value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return orjson.dumps(entry, default=_to_json).decode("utf-8")


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _to_json(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, Path):
        return value.as_posix()
    return repr(value)


def configure_logging(
    level: str = "info",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
    access_log: bool = False,
) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Root level name, any case.
        json_output: ``JsonFormatter`` when True, ``PLAIN_FORMAT`` otherwise.
        logger_levels: Per-logger level overrides.
        access_log: Leave ``uvicorn.access`` at the root level instead of WARNING.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

    if not access_log:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    for name, name_level in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(name_level.upper())
