"""
Memory Service - create, update and delete operations for topics and entries.

Every operation runs under the store lock, raises a
:class:`~mcp_context_memory.utils.errors.MemoryStoreError` subclass on an
expected failure, and records the mutation with the statistics tracker once
it has succeeded.

Update semantics: empty strings, empty lists, empty mappings and the
default importance ``"medium"`` all mean "leave unchanged".  A description
or tag list therefore cannot be cleared through an update, and importance
cannot be set back to ``"medium"`` once changed.
"""

import logging
from typing import Any

from ..models.memory import MemoryEntry, Topic
from ..models.responses import DeleteTopicResult, EntryResult, TopicSummary
from ..models.validators import DEFAULT_IMPORTANCE, IMPORTANCE_RANK, TOPIC_NAME_MAX_LENGTH
from ..storage.memory_store import MemoryStore
from ..utils.errors import AlreadyExistsError, ConfirmationRequiredError, InvalidInputError, NotFoundError
from ..utils.ids import size_of
from .stats_tracker import StatisticsTracker

logger = logging.getLogger(__name__)


def _require_topic_name(name: str) -> None:
    if not name:
        raise InvalidInputError("topic", "Topic name must not be empty")
    if len(name) > TOPIC_NAME_MAX_LENGTH:
        raise InvalidInputError("topic", f"Topic name must be at most {TOPIC_NAME_MAX_LENGTH} characters")


def _require_importance(importance: str) -> None:
    if importance not in IMPORTANCE_RANK:
        raise InvalidInputError("importance", f"Importance must be one of: {', '.join(IMPORTANCE_RANK)}")


class MemoryService:
    """Management operations over a shared :class:`MemoryStore`."""

    def __init__(self, store: MemoryStore, tracker: StatisticsTracker):
        self.store = store
        self.tracker = tracker

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    def create_topic(self, name: str, description: str = "", tags: list[str] | None = None) -> TopicSummary:
        """Create an empty topic.

        Raises AlreadyExistsError (carrying the existing topic's summary)
        when *name* is taken; the store is left untouched in that case.
        """
        _require_topic_name(name)
        with self.store.lock:
            if name in self.store:
                raise AlreadyExistsError(TopicSummary.from_topic(self.store.get_topic(name)))
            topic = self.store.add_topic(Topic(name=name, description=description, tags=list(tags or [])))
            self.tracker.record("add_topic", topic=topic)
            logger.info("Created topic %r", name)
            return TopicSummary.from_topic(topic)

    def update_topic(self, name: str, description: str = "", tags: list[str] | None = None) -> TopicSummary:
        """Overwrite description and/or tags when the new value is non-empty."""
        _require_topic_name(name)
        with self.store.lock:
            topic = self.store.get_topic(name)
            if description:
                topic.description = description
            if tags:
                topic.tags = list(tags)
            topic.touch()
            logger.debug("Updated topic %r", name)
            return TopicSummary.from_topic(topic)

    def delete_topic(self, name: str, confirm: bool = False) -> DeleteTopicResult:
        """Remove a topic and every entry it holds.

        Without *confirm* nothing is removed and ConfirmationRequiredError is
        raised with a preview of what would be deleted.
        """
        _require_topic_name(name)
        with self.store.lock:
            topic = self.store.get_topic(name)
            if not confirm:
                raise ConfirmationRequiredError(TopicSummary.from_topic(topic))

            removed = self.store.remove_topic(name)
            self.tracker.record("remove_topic", topic=removed)
            logger.info("Deleted topic %r with %d entries", name, len(removed.entries))
            return DeleteTopicResult(
                topic=TopicSummary.from_topic(removed),
                removed_entries=len(removed.entries),
                remaining_topics=len(self.store),
            )

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def create_entry(
        self,
        topic: str,
        content: str,
        importance: str = DEFAULT_IMPORTANCE,
        context: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> EntryResult:
        """Append a new entry to an existing topic."""
        if not content:
            raise InvalidInputError("content", "Entry content must not be empty")
        _require_topic_name(topic)
        _require_importance(importance)

        with self.store.lock:
            owner = self.store.get_topic(topic)
            entry = MemoryEntry(
                content=content,
                importance=importance,
                context=context,
                metadata=dict(metadata or {}),
            )
            owner.entries.append(entry)
            owner.touch()
            self.tracker.record("add_entry", topic=owner, entry=entry)
            logger.debug("Added entry %s to topic %r", entry.id, topic)
            return EntryResult(topic=TopicSummary.from_topic(owner), entry=entry.model_copy(deep=True))

    def update_entry(
        self,
        topic: str,
        entry_id: str,
        content: str = "",
        importance: str = DEFAULT_IMPORTANCE,
        context: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> EntryResult:
        """Edit an entry in place; metadata is merged key by key."""
        if not entry_id:
            raise InvalidInputError("entry_id", "Entry id must not be empty")
        _require_topic_name(topic)
        _require_importance(importance)

        with self.store.lock:
            owner = self.store.get_topic(topic)
            entry = owner.find_entry(entry_id)
            if entry is None:
                raise NotFoundError("entry", entry_id, topic=topic)

            size_before = size_of(entry)
            if content:
                entry.content = content
            if importance != DEFAULT_IMPORTANCE:
                entry.importance = importance
            if context:
                entry.context = context
            if metadata:
                entry.metadata = {**entry.metadata, **metadata}

            entry.touch()
            owner.touch()
            self.tracker.resize_entry(size_of(entry) - size_before)
            logger.debug("Updated entry %s in topic %r", entry_id, topic)
            return EntryResult(topic=TopicSummary.from_topic(owner), entry=entry.model_copy(deep=True))

    def delete_entry(self, topic: str, entry_id: str) -> EntryResult:
        """Remove one entry and return it with its (updated) topic summary."""
        if not entry_id:
            raise InvalidInputError("entry_id", "Entry id must not be empty")
        _require_topic_name(topic)

        with self.store.lock:
            owner = self.store.get_topic(topic)
            removed = owner.remove_entry(entry_id)
            if removed is None:
                raise NotFoundError("entry", entry_id, topic=topic)

            owner.touch()
            self.tracker.record("remove_entry", topic=owner, entry=removed)
            logger.debug("Deleted entry %s from topic %r", entry_id, topic)
            return EntryResult(topic=TopicSummary.from_topic(owner), entry=removed)
