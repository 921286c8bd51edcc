"""Data models: records, tool inputs and service results."""

from .memory import MemoryEntry, Topic
from .responses import (
    DeleteTopicResult,
    EntryLookup,
    EntryResult,
    SearchHit,
    SearchResult,
    StatsSnapshot,
    TopicSummary,
    TopicView,
)

__all__ = [
    "DeleteTopicResult",
    "EntryLookup",
    "EntryResult",
    "MemoryEntry",
    "SearchHit",
    "SearchResult",
    "StatsSnapshot",
    "Topic",
    "TopicSummary",
    "TopicView",
]
