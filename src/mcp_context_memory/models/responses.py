"""Service-layer response models.

Typed Pydantic models returned by ``MemoryService`` and ``QueryService``.
The text formatter renders these; tests assert on their attributes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .memory import MemoryEntry, Topic
from .validators import SortBy

# ---------------------------------------------------------------------------
# Topic summaries
# ---------------------------------------------------------------------------


class TopicSummary(BaseModel):
    """Topic header without its entries.

    Used by list_topics, the already-exists notice and the delete preview.
    """

    id: str
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    entry_count: int = 0
    created_at: str
    updated_at: str

    @classmethod
    def from_topic(cls, topic: Topic) -> TopicSummary:
        return cls(
            id=topic.id,
            name=topic.name,
            description=topic.description,
            tags=list(topic.tags),
            entry_count=len(topic.entries),
            created_at=topic.created_at,
            updated_at=topic.updated_at,
        )


# ---------------------------------------------------------------------------
# Management results
# ---------------------------------------------------------------------------


class EntryResult(BaseModel):
    """An entry together with the summary of its owning topic."""

    topic: TopicSummary
    entry: MemoryEntry


class DeleteTopicResult(BaseModel):
    """Result of a confirmed ``delete_topic()``."""

    topic: TopicSummary
    removed_entries: int
    remaining_topics: int


# ---------------------------------------------------------------------------
# Query results
# ---------------------------------------------------------------------------


class TopicView(BaseModel):
    """Sorted, truncated view of a topic's entries."""

    topic: TopicSummary
    entries: list[MemoryEntry] = Field(default_factory=list)
    sort_by: SortBy = "time"
    limit: int = 20
    total: int = 0

    @property
    def hidden(self) -> int:
        """Number of entries not shown because of the limit."""
        return max(self.total - self.limit, 0)


class SearchHit(BaseModel):
    """One search match: where it lives, what it is, and why it matched."""

    topic: str
    entry: MemoryEntry
    relevance: int = Field(ge=1, le=3)


class SearchResult(BaseModel):
    """Ranked, truncated search hits plus the total match count."""

    query: str
    importance: str = "all"
    limit: int = 20
    hits: list[SearchHit] = Field(default_factory=list)
    total: int = 0

    @property
    def hidden(self) -> int:
        """Number of matches not shown because of the limit."""
        return max(self.total - self.limit, 0)


class EntryLookup(BaseModel):
    """Result of ``get_entry()``: the entry and the topic it belongs to."""

    topic: str
    entry: MemoryEntry


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class StatsSnapshot(BaseModel):
    """Tracked counters plus values derived at call time."""

    total_topics: int = 0
    total_entries: int = 0
    total_size: int = 0
    last_access_time: str | None = None
    access_count: int = 0
    average_entry_size: float = 0.0
    total_size_kb: float = 0.0
    average_entries_per_topic: float | None = None
    importance_distribution: dict[str, int] = Field(default_factory=lambda: {"high": 0, "medium": 0, "low": 0})
