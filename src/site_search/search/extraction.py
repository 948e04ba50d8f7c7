"""Title and url extraction for HTML documents.

Extraction is a narrow string-matching contract, not an HTML parser: the
title is the first ``<title>...</title>`` capture, verbatim.
"""

from __future__ import annotations

from pathlib import PurePath, PurePosixPath
import re
from typing import NamedTuple


_TITLE_PATTERN = re.compile(r"<title>(.*?)</title>", re.DOTALL)


class DocumentFields(NamedTuple):
    title: str
    url: str


def relative_url(path: str | PurePath) -> str:
    """Forward-slash url for a root-relative path, without a leading slash.

    Separators are taken from the path's own flavour, so a backslash inside
    a POSIX file name stays part of that name.
    """
    url = path.as_posix() if isinstance(path, PurePath) else path
    return url.lstrip("/")


def extract_title(content: str, fallback: str) -> str:
    match = _TITLE_PATTERN.search(content)
    if match is None:
        return fallback
    return match.group(1)


def extract(path: str | PurePath, content: str | bytes) -> DocumentFields:
    """Return the ``(title, url)`` fields for one document.

    ``path`` is relative to the indexing root. Missing or malformed titles
    fall back to the file's base name, extension included.
    """
    url = relative_url(path)
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    return DocumentFields(title=extract_title(content, PurePosixPath(url).name), url=url)
