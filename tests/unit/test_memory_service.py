"""Unit tests for MemoryService (topic and entry management)."""

import random

import pytest

from mcp_context_memory.services.memory_service import MemoryService
from mcp_context_memory.services.stats_tracker import StatisticsTracker
from mcp_context_memory.storage.memory_store import MemoryStore
from mcp_context_memory.utils.errors import (
    AlreadyExistsError,
    ConfirmationRequiredError,
    InvalidInputError,
    NotFoundError,
)
from mcp_context_memory.utils.ids import size_of


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def tracker():
    return StatisticsTracker()


@pytest.fixture
def service(store, tracker):
    return MemoryService(store, tracker)


@pytest.fixture
def notes(service):
    """A 'Notes' topic with one entry; returns the entry id."""
    service.create_topic("Notes", description="scratch", tags=["misc"])
    return service.create_entry("Notes", "hello world", importance="high", metadata={"source": "chat"}).entry.id


class TestCreateTopic:
    def test_creates_empty_topic(self, service, store, tracker):
        summary = service.create_topic("Notes", description="d", tags=["a", "b"])

        assert summary.name == "Notes"
        assert summary.description == "d"
        assert summary.tags == ["a", "b"]
        assert summary.entry_count == 0
        assert summary.created_at == summary.updated_at
        assert store.get_topic("Notes").id == summary.id
        assert tracker.snapshot().total_topics == 1

    def test_duplicate_returns_existing_and_does_not_mutate(self, service, store, tracker):
        service.create_topic("T", description="original")

        with pytest.raises(AlreadyExistsError) as exc_info:
            service.create_topic("T", description="replacement")

        assert exc_info.value.existing.description == "original"
        assert len(store) == 1
        assert store.get_topic("T").description == "original"
        assert tracker.snapshot().total_topics == 1

    def test_empty_name_rejected(self, service):
        with pytest.raises(InvalidInputError) as exc_info:
            service.create_topic("")
        assert exc_info.value.field == "topic"

    def test_name_length_limit(self, service):
        service.create_topic("x" * 100)
        with pytest.raises(InvalidInputError):
            service.create_topic("x" * 101)


class TestCreateEntry:
    def test_appends_and_touches_topic(self, service, store, tracker):
        service.create_topic("Notes")
        before = store.get_topic("Notes").updated_at

        result = service.create_entry("Notes", "hello", context="chat", metadata={"k": 1})

        topic = store.get_topic("Notes")
        assert result.entry.content == "hello"
        assert result.entry.importance == "medium"
        assert result.entry.context == "chat"
        assert result.entry.metadata == {"k": 1}
        assert result.topic.entry_count == 1
        assert [e.id for e in topic.entries] == [result.entry.id]
        assert topic.updated_at > before
        assert tracker.snapshot().total_entries == 1
        assert tracker.snapshot().total_size > 0

    def test_empty_content_checked_before_topic(self, service):
        with pytest.raises(InvalidInputError) as exc_info:
            service.create_entry("missing", "")
        assert exc_info.value.field == "content"

    def test_missing_topic(self, service, tracker):
        with pytest.raises(NotFoundError):
            service.create_entry("missing", "hello")
        assert tracker.snapshot().access_count == 0

    def test_invalid_importance(self, service):
        service.create_topic("Notes")
        with pytest.raises(InvalidInputError):
            service.create_entry("Notes", "hello", importance="urgent")

    def test_returned_entry_is_a_copy(self, service, store):
        service.create_topic("Notes")
        result = service.create_entry("Notes", "hello")
        result.entry.content = "tampered"
        assert store.get_topic("Notes").entries[0].content == "hello"


class TestUpdateTopic:
    def test_overwrites_non_empty_fields(self, service, store):
        created = service.create_topic("T")
        updated = service.update_topic("T", description="D", tags=["x"])

        assert updated.description == "D"
        assert updated.tags == ["x"]
        assert updated.updated_at > created.created_at
        assert store.get_topic("T").description == "D"

    def test_empty_values_leave_fields_unchanged(self, service):
        service.create_topic("T", description="keep", tags=["keep"])
        updated = service.update_topic("T", description="", tags=[])
        assert updated.description == "keep"
        assert updated.tags == ["keep"]

    def test_missing_topic(self, service):
        with pytest.raises(NotFoundError):
            service.update_topic("nope", description="D")


class TestUpdateEntry:
    def test_partial_update(self, service, store, notes):
        before = store.get_topic("Notes").updated_at

        result = service.update_entry("Notes", notes, content="goodbye", context="later")

        entry = store.get_topic("Notes").find_entry(notes)
        assert entry.content == "goodbye"
        assert entry.context == "later"
        assert entry.importance == "high"
        assert entry.updated_at > entry.created_at
        assert store.get_topic("Notes").updated_at > before
        assert result.entry.content == "goodbye"

    def test_metadata_is_merged(self, service, store, notes):
        service.update_entry("Notes", notes, metadata={"source": "email", "priority": 2})
        entry = store.get_topic("Notes").find_entry(notes)
        assert entry.metadata == {"source": "email", "priority": 2}

        service.update_entry("Notes", notes, metadata={"tag": "x"})
        assert entry.metadata == {"source": "email", "priority": 2, "tag": "x"}

    def test_medium_importance_means_no_change(self, service, store, notes):
        service.update_entry("Notes", notes, importance="medium")
        assert store.get_topic("Notes").find_entry(notes).importance == "high"

        service.update_entry("Notes", notes, importance="low")
        assert store.get_topic("Notes").find_entry(notes).importance == "low"

    def test_empty_values_leave_fields_unchanged(self, service, store, notes):
        service.update_entry("Notes", notes, content="", context="", metadata={})
        entry = store.get_topic("Notes").find_entry(notes)
        assert entry.content == "hello world"
        assert entry.metadata == {"source": "chat"}

    def test_requires_entry_id(self, service, notes):
        with pytest.raises(InvalidInputError) as exc_info:
            service.update_entry("Notes", "", content="x")
        assert exc_info.value.field == "entry_id"

    def test_missing_entry(self, service, notes):
        with pytest.raises(NotFoundError) as exc_info:
            service.update_entry("Notes", "unknown", content="x")
        assert exc_info.value.kind == "entry"
        assert exc_info.value.topic == "Notes"

    def test_missing_topic(self, service, notes):
        with pytest.raises(NotFoundError):
            service.update_entry("Other", notes, content="x")

    def test_update_does_not_count_as_access(self, service, tracker, notes):
        before = tracker.snapshot().access_count
        service.update_entry("Notes", notes, content="changed")
        assert tracker.snapshot().access_count == before

    def test_total_size_follows_edits(self, service, store, tracker, notes):
        other = service.create_entry("Notes", "b").entry.id

        service.update_entry("Notes", notes, content="x" * 500, context="grown", metadata={"k": [1, 2, 3]})
        live = store.get_topic("Notes").entries
        assert tracker.snapshot().total_size == sum(size_of(e) for e in live)

        service.update_entry("Notes", notes, content="y")
        service.delete_entry("Notes", notes)

        remaining = store.get_topic("Notes").find_entry(other)
        assert tracker.snapshot().total_size == size_of(remaining)
        assert tracker.snapshot().total_entries == 1


class TestDeleteTopic:
    def test_without_confirm_previews_only(self, service, store, notes):
        with pytest.raises(ConfirmationRequiredError) as exc_info:
            service.delete_topic("Notes")

        preview = exc_info.value.preview
        assert preview.name == "Notes"
        assert preview.description == "scratch"
        assert preview.tags == ["misc"]
        assert preview.entry_count == 1
        assert len(store) == 1

    def test_confirmed_delete_removes_topic_and_entries(self, service, store, tracker, notes):
        service.create_entry("Notes", "second")
        service.create_topic("Other")

        result = service.delete_topic("Notes", confirm=True)

        assert result.removed_entries == 2
        assert result.remaining_topics == 1
        assert "Notes" not in store
        with pytest.raises(NotFoundError):
            store.find_entry(notes)
        snap = tracker.snapshot()
        assert snap.total_topics == 1
        assert snap.total_entries == 0
        assert snap.total_size == 0

    def test_missing_topic(self, service):
        with pytest.raises(NotFoundError):
            service.delete_topic("nope", confirm=True)


class TestDeleteEntry:
    def test_removes_entry(self, service, store, tracker, notes):
        before = store.get_topic("Notes").updated_at

        result = service.delete_entry("Notes", notes)

        assert result.entry.id == notes
        assert result.topic.entry_count == 0
        assert store.get_topic("Notes").entries == []
        assert store.get_topic("Notes").updated_at > before
        assert tracker.snapshot().total_entries == 0

    def test_requires_entry_id(self, service, notes):
        with pytest.raises(InvalidInputError):
            service.delete_entry("Notes", "")

    def test_missing_entry(self, service, notes):
        with pytest.raises(NotFoundError):
            service.delete_entry("Notes", "unknown")

    def test_missing_topic(self, service, notes):
        with pytest.raises(NotFoundError):
            service.delete_entry("Other", notes)


def test_entry_count_tracks_adds_minus_removes(service, store, tracker):
    """Random add/remove sequence: count always equals adds minus removes."""
    rng = random.Random(7)
    service.create_topic("Notes")
    live: list[str] = []
    adds = removes = 0

    for step in range(200):
        if live and rng.random() < 0.4:
            service.delete_entry("Notes", live.pop(rng.randrange(len(live))))
            removes += 1
        else:
            live.append(service.create_entry("Notes", f"entry {step}").entry.id)
            adds += 1

        assert len(store.get_topic("Notes").entries) == adds - removes
        assert tracker.snapshot().total_entries == adds - removes
