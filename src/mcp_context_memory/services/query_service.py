"""Read-only queries over the memory store: list, view, search, lookup, stats."""

import json
import logging
from typing import Any

from ..models.memory import MemoryEntry
from ..models.responses import (
    EntryLookup,
    SearchHit,
    SearchResult,
    StatsSnapshot,
    TopicSummary,
    TopicView,
)
from ..models.validators import DEFAULT_LIMIT, IMPORTANCE_RANK, LIMIT_MAX, LIMIT_MIN, SortBy
from ..storage.memory_store import MemoryStore
from ..utils.errors import InvalidInputError
from .stats_tracker import StatisticsTracker

logger = logging.getLogger(__name__)

# Relevance by the first field that matched
CONTENT_RELEVANCE = 3
CONTEXT_RELEVANCE = 2
METADATA_RELEVANCE = 1


def _metadata_text(value: Any) -> str:
    """Render a metadata value as text for substring matching."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def score_entry(entry: MemoryEntry, needle: str) -> int:
    """Return the relevance of *entry* for the lower-cased *needle*, 0 if none."""
    if needle in entry.content.lower():
        return CONTENT_RELEVANCE
    if entry.context and needle in entry.context.lower():
        return CONTEXT_RELEVANCE
    if any(needle in _metadata_text(value).lower() for value in entry.metadata.values()):
        return METADATA_RELEVANCE
    return 0


def sort_entries(entries: list[MemoryEntry], sort_by: SortBy) -> list[MemoryEntry]:
    """Return a sorted copy: newest first, or highest importance first.

    Both orders are stable, so ties keep insertion order.
    """
    if sort_by == "importance":
        return sorted(entries, key=lambda e: IMPORTANCE_RANK.get(e.importance, 0), reverse=True)
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


def _require_limit(limit: int) -> None:
    if not LIMIT_MIN <= limit <= LIMIT_MAX:
        raise InvalidInputError("limit", f"Limit must be between {LIMIT_MIN} and {LIMIT_MAX}, got {limit}")


class QueryService:
    """Query operations over a shared :class:`MemoryStore`."""

    def __init__(self, store: MemoryStore, tracker: StatisticsTracker):
        self.store = store
        self.tracker = tracker

    def list_topics(self) -> list[TopicSummary]:
        """Summaries of every topic in insertion order."""
        return [TopicSummary.from_topic(topic) for topic in self.store.topics()]

    def view_topic(self, name: str, sort_by: SortBy = "time", limit: int = DEFAULT_LIMIT) -> TopicView:
        """Sorted, truncated entries of one topic."""
        if not name:
            raise InvalidInputError("topic", "Topic name must not be empty")
        _require_limit(limit)

        with self.store.lock:
            topic = self.store.get_topic(name)
            ordered = sort_entries(topic.entries, sort_by)
            return TopicView(
                topic=TopicSummary.from_topic(topic),
                entries=[entry.model_copy(deep=True) for entry in ordered[:limit]],
                sort_by=sort_by,
                limit=limit,
                total=len(topic.entries),
            )

    def search(self, query: str, importance: str = "all", limit: int = DEFAULT_LIMIT) -> SearchResult:
        """Case-insensitive substring search across every entry.

        Matches ``content``, then ``context``, then metadata values, scoring
        3/2/1 for the first field that matched.  Results are ordered by
        relevance; equal scores keep topic then entry insertion order.
        """
        if not query:
            raise InvalidInputError("query", "Search query must not be empty")
        _require_limit(limit)

        needle = query.lower()
        hits: list[SearchHit] = []
        for topic_name, entry in self.store.iter_entries():
            if importance != "all" and entry.importance != importance:
                continue
            relevance = score_entry(entry, needle)
            if relevance:
                hits.append(SearchHit(topic=topic_name, entry=entry.model_copy(deep=True), relevance=relevance))

        hits.sort(key=lambda hit: hit.relevance, reverse=True)
        logger.debug("Search %r (importance=%s) matched %d entries", query, importance, len(hits))
        return SearchResult(query=query, importance=importance, limit=limit, hits=hits[:limit], total=len(hits))

    def get_entry(self, entry_id: str) -> EntryLookup:
        """Find an entry by id across all topics."""
        if not entry_id:
            raise InvalidInputError("entry_id", "Entry id must not be empty")
        topic_name, entry = self.store.find_entry(entry_id)
        return EntryLookup(topic=topic_name, entry=entry.model_copy(deep=True))

    def stats(self) -> StatsSnapshot:
        """Tracked counters plus averages and a live importance histogram."""
        counters = self.tracker.snapshot()

        distribution = {"high": 0, "medium": 0, "low": 0}
        for _, entry in self.store.iter_entries():
            distribution[entry.importance] = distribution.get(entry.importance, 0) + 1

        average_entry_size = 0.0
        if counters.total_entries > 0:
            average_entry_size = round(counters.total_size / counters.total_entries, 2)

        per_topic = None
        if counters.total_entries > 0 and counters.total_topics > 0:
            per_topic = round(counters.total_entries / counters.total_topics, 2)

        return StatsSnapshot(
            total_topics=counters.total_topics,
            total_entries=counters.total_entries,
            total_size=counters.total_size,
            last_access_time=counters.last_access_time,
            access_count=counters.access_count,
            average_entry_size=average_entry_size,
            total_size_kb=round(counters.total_size / 1024, 2),
            average_entries_per_topic=per_topic,
            importance_distribution=distribution,
        )
