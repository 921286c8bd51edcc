"""In-process topic store.

An insertion-ordered mapping from topic name to :class:`Topic`.  Every
public method runs under one re-entrant lock, and services hold the same
lock (via :attr:`MemoryStore.lock`) around multi-step mutations so each
operation is observed as a single step.
"""

import logging
import threading
from collections.abc import Iterator

from ..models.memory import MemoryEntry, Topic
from ..models.responses import TopicSummary
from ..utils.errors import AlreadyExistsError, NotFoundError

logger = logging.getLogger(__name__)


class MemoryStore:
    """Ordered topic map held entirely in memory."""

    def __init__(self) -> None:
        self._topics: dict[str, Topic] = {}
        self.lock = threading.RLock()

    def __contains__(self, name: object) -> bool:
        with self.lock:
            return name in self._topics

    def __len__(self) -> int:
        with self.lock:
            return len(self._topics)

    def get_topic(self, name: str) -> Topic:
        """Return the topic called *name* or raise NotFoundError."""
        with self.lock:
            topic = self._topics.get(name)
            if topic is None:
                raise NotFoundError("topic", name)
            return topic

    def add_topic(self, topic: Topic) -> Topic:
        """Insert *topic*; never overwrites an existing name."""
        with self.lock:
            existing = self._topics.get(topic.name)
            if existing is not None:
                raise AlreadyExistsError(TopicSummary.from_topic(existing))
            self._topics[topic.name] = topic
            logger.debug("Added topic %r (%s)", topic.name, topic.id)
            return topic

    def remove_topic(self, name: str) -> Topic:
        """Remove and return the topic called *name* with all its entries."""
        with self.lock:
            topic = self._topics.pop(name, None)
            if topic is None:
                raise NotFoundError("topic", name)
            logger.debug("Removed topic %r with %d entries", name, len(topic.entries))
            return topic

    def topics(self) -> list[Topic]:
        """Return the topics in insertion order."""
        with self.lock:
            return list(self._topics.values())

    def iter_entries(self) -> Iterator[tuple[str, MemoryEntry]]:
        """Yield ``(topic name, entry)`` in topic then entry insertion order.

        Iterates over a snapshot, so callers may mutate the store afterwards.
        """
        with self.lock:
            snapshot = [(name, entry) for name, topic in self._topics.items() for entry in topic.entries]
        yield from snapshot

    def find_entry(self, entry_id: str) -> tuple[str, MemoryEntry]:
        """Return ``(topic name, entry)`` for the first entry with *entry_id*."""
        with self.lock:
            for name, topic in self._topics.items():
                entry = topic.find_entry(entry_id)
                if entry is not None:
                    return name, entry
        raise NotFoundError("entry", entry_id)

    def clear(self) -> None:
        """Drop every topic."""
        with self.lock:
            self._topics.clear()
