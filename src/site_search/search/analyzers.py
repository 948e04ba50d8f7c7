"""Analyzer utilities for the embedded search index.

Analyzers follow a composable tokenizer/filter design: a tokenizer turns raw
text into a stream of tokens and filters rewrite or drop tokens. Schema
fields reference analyzers by name so the indexing and query paths always
analyze text the same way.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, **updates: object) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }
        data.update(updates)
        return Token(**data)  # type: ignore[arg-type]


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class RegexTokenizer:
    """Yields one token per run of alphanumeric characters.

    Underscores count as separators, so ``get_user`` yields ``get`` and ``user``.
    """

    def __init__(self, pattern: str = r"[^\W_]+", flags: int = re.UNICODE) -> None:
        self.pattern = re.compile(pattern, flags)

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self.pattern.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield token.copy_with(text=token.text.lower())


DEFAULT_STOPWORDS = (
    "a",
    "an",
    "and",
    "are",
    "as",
    "at",
    "be",
    "by",
    "for",
    "in",
    "is",
    "it",
    "of",
    "on",
    "or",
    "the",
    "to",
    "with",
)


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Sequence[str] | None = None) -> None:
        vocab = stopwords if stopwords is not None else DEFAULT_STOPWORDS
        self.stopwords = frozenset(word.lower() for word in vocab)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.lower() not in self.stopwords:
                yield token


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = [token for token in stream if token.text]
        for idx, token in enumerate(tokens):  # positions stay dense after filtering
            token.position = idx
        return tokens


class SimpleAnalyzer:
    """Lowercased alphanumeric runs; the default for titles and url components."""

    def __init__(self, *, stopwords: Sequence[str] | None = None, remove_stopwords: bool = False) -> None:
        filters: list[TokenFilter] = [LowercaseFilter()]
        if remove_stopwords:
            filters.append(StopFilter(stopwords))
        self.pipeline = AnalyzerPipeline(RegexTokenizer(), filters)

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)


class KeywordAnalyzer:
    """Analyzer that treats the entire input as a single, case-preserved token."""

    def __call__(self, text: str) -> list[Token]:
        if not text:
            return []
        return [Token(text=text, position=0, start_char=0, end_char=len(text))]


_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    "default": lambda: SimpleAnalyzer(),
    "simple": lambda: SimpleAnalyzer(),
    "simple-stop": lambda: SimpleAnalyzer(remove_stopwords=True),
    "keyword": lambda: KeywordAnalyzer(),
}


def register_analyzer(name: str, factory: Callable[[], Analyzer]) -> None:
    """Register an analyzer factory so schema fields can reference it by name."""

    normalized = name.lower()
    if normalized in _ANALYZER_FACTORIES:
        msg = f"Analyzer '{name}' is already registered"
        raise ValueError(msg)
    _ANALYZER_FACTORIES[normalized] = factory


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the simple analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {sorted(_ANALYZER_FACTORIES)}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()
