"""HTML renderer for search results."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape
import re
from urllib.parse import quote


_PLACEHOLDER = re.compile(r"__(PAGE_TITLE|QUERY|BODY)__")

_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>__PAGE_TITLE__</title>
    <style>
      body { font-family: system-ui, sans-serif; max-width: 48rem; margin: 2rem auto; padding: 0 1rem; }
      form { display: flex; gap: 0.5rem; margin-bottom: 1.5rem; }
      input[type=search] { flex: 1; padding: 0.4rem; }
      ol { padding-left: 1.5rem; }
      li { margin-bottom: 0.6rem; }
      .url { color: #555; font-size: 0.85rem; }
    </style>
  </head>
  <body>
    <form action="/search" method="get">
      <input type="search" name="q" value="__QUERY__" autofocus />
      <button type="submit">Search</button>
    </form>
__BODY__
  </body>
</html>
"""


def result_href(url: str) -> str:
    """Root-relative link to an indexed document."""
    return "/" + quote(url, safe="/")


def render_result_list(results: Sequence[tuple[str, str]]) -> str:
    items = []
    for title, url in results:
        items.append(
            f'      <li><a href="{escape(result_href(url))}">{escape(title)}</a>'
            f'<div class="url">{escape(url)}</div></li>'
        )
    return "    <ol>\n" + "\n".join(items) + "\n    </ol>"


def render_search_page(query: str, results: Sequence[tuple[str, str]]) -> str:
    """Render a full search page for ``query`` and its ranked results."""
    if results:
        body = render_result_list(results)
    elif query.strip():
        body = f"    <p>No results for <strong>{escape(query)}</strong>.</p>"
    else:
        body = "    <p>Enter a search term.</p>"

    page_title = f"Search: {query}" if query.strip() else "Search"
    values = {"PAGE_TITLE": escape(page_title), "QUERY": escape(query), "BODY": body}
    # single pass, so placeholder-like text inside values is left alone
    return _PLACEHOLDER.sub(lambda match: values[match.group(1)], _PAGE_TEMPLATE)
