"""Query string parsing.

Supported syntax, all optional:

- ``term``            optional clause (documents matching any clause are candidates)
- ``+term``           required clause
- ``-term``           excluded clause
- ``field:term``      restrict a clause to one schema field (``title`` or ``url``)
- ``"some phrase"``   consecutive terms; combines with the prefixes above

Anything the grammar rejects degrades to a plain disjunction over the
whitespace-split words of the original string. Parsing never raises.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
import logging
import re


logger = logging.getLogger(__name__)

_FIELD_PREFIX = re.compile(r"([A-Za-z_][A-Za-z0-9_]*):")


class QuerySyntaxError(ValueError):
    """Raised by the grammar when a query string cannot be parsed."""


class Occur(str, Enum):
    SHOULD = "should"
    MUST = "must"
    MUST_NOT = "must_not"


@dataclass(frozen=True)
class Clause:
    """One query clause: raw text plus its modifiers."""

    text: str
    field: str | None = None
    phrase: bool = False
    occur: Occur = Occur.SHOULD


@dataclass(frozen=True)
class ParsedQuery:
    """Clauses in query order; ``fallback`` marks a degraded parse."""

    clauses: tuple[Clause, ...]
    fallback: bool = False

    def is_empty(self) -> bool:
        return not self.clauses


def parse_query(
    text: str,
    *,
    fields: Collection[str] = ("title", "url"),
) -> ParsedQuery:
    """Parse ``text`` into clauses, falling back to plain words on syntax errors."""

    if not text.strip():
        return ParsedQuery(())

    fallback = False
    try:
        clauses = _parse_clauses(text, fields)
    except QuerySyntaxError as exc:
        logger.debug("Query %r degraded to plain terms: %s", text, exc)
        clauses = [Clause(word) for word in text.split()]
        fallback = True

    return ParsedQuery(tuple(dict.fromkeys(clauses)), fallback=fallback)


def _parse_clauses(text: str, fields: Collection[str]) -> list[Clause]:
    clauses: list[Clause] = []
    length = len(text)
    pos = 0
    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue

        occur = Occur.SHOULD
        if text[pos] in "+-":
            occur = Occur.MUST if text[pos] == "+" else Occur.MUST_NOT
            pos += 1
            if pos >= length or text[pos].isspace():
                raise QuerySyntaxError(f"dangling operator at offset {pos - 1}")

        field = None
        match = _FIELD_PREFIX.match(text, pos)
        if match:
            field = match.group(1)
            if field not in fields:
                raise QuerySyntaxError(f"unknown field '{field}'")
            pos = match.end()
            if pos >= length or text[pos].isspace():
                raise QuerySyntaxError(f"missing value for field '{field}'")

        if text[pos] == '"':
            closing = text.find('"', pos + 1)
            if closing == -1:
                raise QuerySyntaxError(f"unbalanced quote at offset {pos}")
            value = text[pos + 1 : closing]
            if not value.strip():
                raise QuerySyntaxError(f"empty phrase at offset {pos}")
            pos = closing + 1
            if pos < length and not text[pos].isspace():
                raise QuerySyntaxError(f"unexpected character after phrase at offset {pos}")
            clauses.append(Clause(value, field=field, phrase=True, occur=occur))
            continue

        end = pos
        while end < length and not text[end].isspace():
            end += 1
        value = text[pos:end]
        if '"' in value:
            raise QuerySyntaxError(f"stray quote in '{value}'")
        clauses.append(Clause(value, field=field, occur=occur))
        pos = end

    return clauses
