"""Unit tests for ranked query evaluation."""

from __future__ import annotations

import pytest

from site_search.search.engine import DEFAULT_RESULT_LIMIT, QueryEngine, search
from site_search.search.query import parse_query
from site_search.search.storage import build_index


pytestmark = pytest.mark.unit


@pytest.fixture
def getting_started_index():
    return build_index([("Getting Started", "a.html"), ("Advanced Usage", "b.html")])


def _score_of(engine: QueryEngine, index, query: str, url: str) -> float:
    for ranked in engine.rank(index, query, limit=index.doc_count):
        if index.get_document(ranked.doc_id).url == url:
            return ranked.score
    return 0.0


class TestEndToEnd:
    def test_matching_query(self, getting_started_index):
        assert search("started", getting_started_index) == [("Getting Started", "a.html")]

    def test_query_without_matches(self, getting_started_index):
        assert search("zzz", getting_started_index) == []

    @pytest.mark.parametrize("query", ["", " ", "\t \n"])
    def test_blank_query_short_circuits(self, getting_started_index, query):
        assert search(query, getting_started_index) == []

    def test_query_is_case_insensitive(self, getting_started_index):
        assert search("ADVANCED", getting_started_index) == [("Advanced Usage", "b.html")]

    def test_empty_index(self):
        assert search("anything", build_index([])) == []


class TestRanking:
    def test_more_matching_terms_rank_higher(self):
        index = build_index([("alpha", "one.html"), ("alpha beta", "two.html")])

        assert search("alpha beta", index) == [("alpha beta", "two.html"), ("alpha", "one.html")]

    def test_higher_term_frequency_ranks_higher(self):
        index = build_index([("python", "one.html"), ("python python", "two.html")])
        engine = QueryEngine()

        assert _score_of(engine, index, "python", "two.html") > _score_of(engine, index, "python", "one.html")
        assert search("python", index)[0] == ("python python", "two.html")

    @pytest.mark.parametrize("occurrences", [1, 2, 3, 5])
    def test_score_monotonic_in_occurrences(self, occurrences):
        fewer = " ".join(["term"] * occurrences)
        more = " ".join(["term"] * (occurrences + 1))
        index = build_index([(fewer, "fewer.html"), (more, "more.html")])
        engine = QueryEngine()

        assert _score_of(engine, index, "term", "more.html") >= _score_of(engine, index, "term", "fewer.html")

    def test_ties_keep_indexing_order(self):
        forward = build_index([("Alpha guide", "x.html"), ("Alpha guide", "y.html")])
        backward = build_index([("Alpha guide", "y.html"), ("Alpha guide", "x.html")])

        assert [url for _, url in search("alpha", forward)] == ["x.html", "y.html"]
        assert [url for _, url in search("alpha", backward)] == ["y.html", "x.html"]

    def test_cutoff_returns_exactly_ten(self):
        index = build_index([("Guide page", f"p{i:02d}.html") for i in range(15)])

        results = search("guide", index)
        assert len(results) == DEFAULT_RESULT_LIMIT == 10
        assert [url for _, url in results] == [f"p{i:02d}.html" for i in range(10)]

    def test_custom_limit(self):
        index = build_index([("Guide", f"p{i}.html") for i in range(5)])

        assert len(search("guide", index, limit=3)) == 3
        assert search("guide", index, limit=0) == []

    def test_rebuilds_are_idempotent(self):
        documents = [("Install guide", "install.html"), ("Guide to upgrades", "upgrade.html"), ("FAQ", "faq.html")]

        first = search("guide install faq", build_index(documents))
        second = search("guide install faq", build_index(documents))
        assert first == second
        assert len(first) == 3


class TestUrlMatching:
    def test_exact_url_match_outranks_partial_matches(self):
        index = build_index([("Other intro", "docs/other.html"), ("Intro", "docs/intro.html")])

        assert search("docs/intro.html", index)[0] == ("Intro", "docs/intro.html")

    def test_url_components_are_searchable(self):
        index = build_index([("Welcome", "guides/setup.html"), ("Welcome", "index.html")])

        assert search("setup", index) == [("Welcome", "guides/setup.html")]

    def test_exact_url_term_is_case_sensitive(self):
        index = build_index([("Intro", "Docs/Intro.html")])
        engine = QueryEngine()

        exact = _score_of(engine, index, "Docs/Intro.html", "Docs/Intro.html")
        lowered = _score_of(engine, index, "docs/intro.html", "Docs/Intro.html")
        assert exact > lowered > 0


class TestQueryGrammar:
    @pytest.fixture
    def index(self):
        return build_index(
            [
                ("alpha", "a.html"),
                ("beta", "b.html"),
                ("alpha beta", "c.html"),
            ]
        )

    def test_required_clause_filters_candidates(self, index):
        assert [url for _, url in search("+alpha beta", index)] == ["c.html", "a.html"]

    def test_excluded_clause_removes_matches(self, index):
        assert [url for _, url in search("alpha -beta", index)] == ["a.html"]

    def test_only_exclusions_match_nothing(self, index):
        assert search("-alpha", index) == []

    def test_all_required_clauses_must_match(self, index):
        assert [url for _, url in search("+alpha +beta", index)] == ["c.html"]

    def test_field_selector_restricts_channels(self, index):
        assert search("title:html", index) == []
        assert len(search("html", index)) == 3

    def test_url_field_selector(self):
        index = build_index([("Guide", "a.html"), ("Other", "guide.html")])

        assert search("url:guide", index) == [("Other", "guide.html")]

    def test_phrase_requires_adjacent_terms(self):
        index = build_index([("getting started quickly", "a.html"), ("started getting", "b.html")])

        assert search('"getting started"', index) == [("getting started quickly", "a.html")]
        assert len(search("getting started", index)) == 2

    def test_malformed_query_falls_back_to_plain_terms(self):
        index = build_index([("Unterminated strings", "a.html"), ("Bob's page", "bob.html")])

        assert search('title:"unterminated', index) == [("Unterminated strings", "a.html")]
        assert search("author:bob", index) == [("Bob's page", "bob.html")]

    @pytest.mark.parametrize("query", ["+", "-", '"', "::", "+-", "title:", '+url:""', "+!!!"])
    def test_odd_queries_never_raise(self, index, query):
        assert isinstance(search(query, index), list)

    def test_required_clause_without_terms_is_ignored(self, index):
        assert [url for _, url in search("+!!! alpha", index)] == ["a.html", "c.html"]

    def test_long_query_still_matches_its_last_word(self, getting_started_index):
        query = " ".join(f"w{i}" for i in range(40)) + " started"

        assert search(query, getting_started_index) == [("Getting Started", "a.html")]

    def test_accepts_pre_parsed_queries(self, index):
        engine = QueryEngine()
        parsed = parse_query("beta")

        assert [index.get_document(r.doc_id).url for r in engine.rank(index, parsed)] == ["b.html", "c.html"]
