"""Unit tests for title/url extraction."""

from pathlib import Path, PurePosixPath, PureWindowsPath

import pytest

from site_search.search.extraction import DocumentFields, extract, relative_url


pytestmark = pytest.mark.unit


class TestTitle:
    def test_captures_inner_text(self):
        html = "<html><head><title>Getting Started</title></head></html>"
        assert extract("a.html", html).title == "Getting Started"

    def test_whitespace_is_preserved_verbatim(self):
        assert extract("a.html", "<title>  Spaced Title \t</title>").title == "  Spaced Title \t"

    def test_multiline_title(self):
        assert extract("a.html", "<title>\n  Line one\n  Line two\n</title>").title == "\n  Line one\n  Line two\n"

    def test_first_title_wins_and_capture_is_non_greedy(self):
        html = "<title>First</title><body><title>Second</title></body>"
        assert extract("a.html", html).title == "First"

    def test_entities_are_not_unescaped(self):
        assert extract("a.html", "<title>Q&amp;A &lt;draft&gt;</title>").title == "Q&amp;A &lt;draft&gt;"

    def test_empty_title_element(self):
        assert extract("a.html", "<title></title>").title == ""

    @pytest.mark.parametrize(
        "html",
        [
            "<html><body>No title here</body></html>",
            "<TITLE>Upper case tag</TITLE>",
            "<title>Never closed",
            "<title lang='en'>Attributes</title>",
            "",
        ],
    )
    def test_falls_back_to_base_name(self, html):
        assert extract("docs/guide/page.html", html).title == "page.html"

    def test_bytes_content_is_decoded(self):
        assert extract("a.html", "<title>Café</title>".encode()).title == "Café"

    def test_invalid_bytes_never_raise(self):
        fields = extract("broken.html", b"<title>\xff\xfeOops</title>")
        assert fields.title.endswith("Oops")


class TestUrl:
    def test_relative_path_is_kept(self):
        assert extract("docs/guide/page.html", "").url == "docs/guide/page.html"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (PurePosixPath("docs/a.html"), "docs/a.html"),
            (PureWindowsPath("docs\\nested\\a.html"), "docs/nested/a.html"),
            (PurePosixPath("odd\\name.html"), "odd\\name.html"),
            ("/leading/slash.html", "leading/slash.html"),
            (Path("top.html"), "top.html"),
        ],
    )
    def test_url_follows_path_flavour_without_leading_slash(self, path, expected):
        assert relative_url(path) == expected

    def test_result_unpacks_as_title_url_pair(self):
        title, url = extract("a.html", "<title>T</title>")

        assert (title, url) == ("T", "a.html")
        assert extract("a.html", "<title>T</title>") == DocumentFields("T", "a.html")
