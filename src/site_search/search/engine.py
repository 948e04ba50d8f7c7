"""Ranked query evaluation over an ``InvertedIndex`` snapshot."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
import heapq

from site_search.search.models import Posting, RankedDocument
from site_search.search.phrase import contains_phrase
from site_search.search.query import Clause, Occur, ParsedQuery, parse_query
from site_search.search.schema import Channel
from site_search.search.stats import calculate_idf, term_weight
from site_search.search.storage import InvertedIndex


DEFAULT_RESULT_LIMIT = 10


class QueryEngine:
    """Score documents for a query with a TF-IDF style sum over matched terms.

    The engine keeps no per-call state, so one instance can serve
    concurrent searches against the same snapshot.
    """

    def __init__(
        self,
        *,
        k1: float = 1.2,
        b: float = 0.0,
    ) -> None:
        self.k1 = k1
        self.b = b

    def parse(self, index: InvertedIndex, query: str) -> ParsedQuery:
        return parse_query(query, fields=index.schema.field_names)

    def rank(
        self,
        index: InvertedIndex,
        query: str | ParsedQuery,
        *,
        limit: int = DEFAULT_RESULT_LIMIT,
    ) -> list[RankedDocument]:
        """Return up to ``limit`` documents by descending score, ties in index order."""

        if isinstance(query, str):
            if not query.strip():
                return []
            query = self.parse(index, query)
        if query.is_empty() or limit <= 0 or index.doc_count == 0:
            return []

        doc_scores: dict[int, float] = defaultdict(float)
        required: set[int] | None = None
        excluded: set[int] = set()

        for clause in query.clauses:
            contributions = self._score_clause(index, clause)
            if contributions is None:
                continue
            if clause.occur is Occur.MUST_NOT:
                excluded.update(contributions)
                continue
            if clause.occur is Occur.MUST:
                matched = set(contributions)
                required = matched if required is None else required & matched
            for doc_id, value in contributions.items():
                doc_scores[doc_id] += value

        candidates = [
            (doc_id, score)
            for doc_id, score in doc_scores.items()
            if doc_id not in excluded and (required is None or doc_id in required)
        ]

        def order(item: tuple[int, float]) -> tuple[float, int]:
            return (-item[1], item[0])

        if limit < len(candidates):
            top_items = heapq.nsmallest(limit, candidates, key=order)
        else:
            top_items = sorted(candidates, key=order)
        return [RankedDocument(doc_id=doc_id, score=score) for doc_id, score in top_items]

    def search(
        self,
        index: InvertedIndex,
        query: str,
        *,
        limit: int = DEFAULT_RESULT_LIMIT,
    ) -> list[tuple[str, str]]:
        """Return ``(title, url)`` pairs for the top ranked documents."""
        return [index.get_document(ranked.doc_id).as_pair() for ranked in self.rank(index, query, limit=limit)]

    # --- internal helpers -------------------------------------------------

    def _score_clause(self, index: InvertedIndex, clause: Clause) -> dict[int, float] | None:
        """Per-document score of one clause, or None when it yields no analyzed terms.

        Exact channels add score but never keep an otherwise empty clause
        alive, so ``+!!!`` is ignored rather than matching nothing.
        """

        contributions: dict[int, float] = defaultdict(float)
        has_terms = False
        for channel in index.schema.channels_for(clause.field):
            terms = _clause_terms(channel, clause)
            if not terms:
                continue
            has_terms = has_terms or not channel.exact
            if clause.phrase and len(terms) > 1:
                self._score_phrase(index, channel, terms, contributions)
                continue
            for term in dict.fromkeys(terms):
                self._score_term(index, channel, index.get_postings(channel.key, term), contributions)
        return contributions if has_terms else None

    def _score_term(
        self,
        index: InvertedIndex,
        channel: Channel,
        postings: Sequence[Posting],
        contributions: dict[int, float],
        *,
        only: set[int] | None = None,
    ) -> None:
        if not postings:
            return
        idf = calculate_idf(len(postings), index.doc_count)
        avg_length = index.average_length(channel.key)
        lengths = index.field_lengths.get(channel.key, {})
        for posting in postings:
            if only is not None and posting.doc_id not in only:
                continue
            doc_length = lengths.get(posting.doc_id, posting.frequency)
            weight = term_weight(posting.frequency, doc_length, avg_length, k1=self.k1, b=self.b)
            contributions[posting.doc_id] += idf * weight * channel.boost

    def _score_phrase(
        self,
        index: InvertedIndex,
        channel: Channel,
        terms: Sequence[str],
        contributions: dict[int, float],
    ) -> None:
        postings_by_term = {term: index.get_postings(channel.key, term) for term in terms}
        if not all(postings_by_term.values()):
            return

        positions_by_term = {
            term: {posting.doc_id: posting.positions for posting in postings}
            for term, postings in postings_by_term.items()
        }
        shared = set.intersection(*(set(doc_map) for doc_map in positions_by_term.values()))
        matched = {
            doc_id
            for doc_id in shared
            if contains_phrase([positions_by_term[term][doc_id] for term in terms])
        }
        if not matched:
            return
        for term, postings in postings_by_term.items():
            self._score_term(index, channel, postings, contributions, only=matched)


def _clause_terms(channel: Channel, clause: Clause) -> list[str]:
    if channel.exact:
        return [clause.text] if clause.text else []
    return [token.text for token in channel.analyzer()(clause.text)]


def search(
    query_string: str,
    index: InvertedIndex,
    *,
    limit: int = DEFAULT_RESULT_LIMIT,
    engine: QueryEngine | None = None,
) -> list[tuple[str, str]]:
    """Search ``index`` and return at most ``limit`` ``(title, url)`` pairs."""
    return (engine or QueryEngine()).search(index, query_string, limit=limit)
