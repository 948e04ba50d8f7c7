"""
Schema definition for the site index.

The schema is fixed at two fields:

- ``title``: analyzed text, stored for display.
- ``url``: keyword field, stored verbatim and indexed as one exact term. It
  also indexes its analyzed path components so partial url queries match.

Each field contributes one or more postings *channels* to the index. A
channel is a named postings map together with the analyzer that produced it;
the query engine evaluates query terms channel by channel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from site_search.search.analyzers import Analyzer, KeywordAnalyzer, get_analyzer


@dataclass(frozen=True)
class Channel:
    """A postings map inside the index, owned by one schema field.

    ``exact`` channels compare raw query words instead of analyzed tokens.
    """

    key: str
    field_name: str
    analyzer_name: str | None
    exact: bool = False
    boost: float = 1.0

    def analyzer(self) -> Analyzer:
        if self.exact:
            return KeywordAnalyzer()
        return get_analyzer(self.analyzer_name)


@dataclass(frozen=True)
class SchemaField(ABC):
    """Base class for all schema fields."""

    name: str
    boost: float = 1.0

    @abstractmethod
    def channels(self) -> tuple[Channel, ...]:
        """Return the postings channels this field writes."""


@dataclass(frozen=True)
class TextField(SchemaField):
    """
    Analyzed text field for full-text search.

    Args:
        name: Field name (e.g., "title")
        boost: Channel weight in scoring (default: 1.0)
        analyzer_name: Name of analyzer to use (default: None = simple)
    """

    analyzer_name: str | None = None

    def channels(self) -> tuple[Channel, ...]:
        return (Channel(self.name, self.name, self.analyzer_name, boost=self.boost),)


@dataclass(frozen=True)
class KeywordField(SchemaField):
    """
    Exact-match keyword field.

    The raw value is indexed as a single case-preserved term. When
    ``component_analyzer`` is set the value is additionally analyzed into a
    ``<name>.parts`` channel, which is how urls stay searchable by path segment.
    """

    component_analyzer: str | None = None

    @property
    def components_key(self) -> str:
        return f"{self.name}.parts"

    def channels(self) -> tuple[Channel, ...]:
        exact = Channel(self.name, self.name, None, exact=True, boost=self.boost)
        if self.component_analyzer is None:
            return (exact,)
        return (exact, Channel(self.components_key, self.name, self.component_analyzer, boost=self.boost))


@dataclass
class Schema:
    """Schema definition for a search index."""

    fields: list[SchemaField]
    unique_field: str = "url"

    def __post_init__(self) -> None:
        self._field_map: dict[str, SchemaField] = {f.name: f for f in self.fields}
        if self.unique_field not in self._field_map:
            msg = f"Unique field '{self.unique_field}' not found in schema"
            raise ValueError(msg)
        self._channels: tuple[Channel, ...] = tuple(channel for f in self.fields for channel in f.channels())

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._field_map)

    @property
    def channels(self) -> tuple[Channel, ...]:
        """All postings channels in schema order."""
        return self._channels

    def channels_for(self, field_name: str | None) -> tuple[Channel, ...]:
        """Channels searched for a clause, all of them when no field is given."""
        if field_name is None:
            return self._channels
        return tuple(channel for channel in self._channels if channel.field_name == field_name)


def create_default_schema(*, title_analyzer: str | None = "simple") -> Schema:
    """Create the two-field schema used for site search."""
    return Schema(
        unique_field="url",
        fields=[
            TextField("title", analyzer_name=title_analyzer),
            KeywordField("url", component_analyzer="simple"),
        ],
    )
