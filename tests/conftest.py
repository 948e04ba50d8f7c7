"""Shared test fixtures and configuration."""

from collections.abc import Callable
import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop SITE_SEARCH_* variables so settings fall back to their defaults."""
    for key in list(os.environ):
        if key.upper().startswith("SITE_SEARCH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_site(tmp_path) -> Callable[[dict[str, str | bytes]], Path]:
    """Write ``{relative_path: content}`` under a fresh site root and return the root."""

    def _make(files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "site"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def two_page_site(make_site) -> Path:
    return make_site(
        {
            "a.html": "<html><head><title>Getting Started</title></head><body>Intro</body></html>",
            "b.html": "<html><head><title>Advanced Usage</title></head><body>More</body></html>",
        }
    )
