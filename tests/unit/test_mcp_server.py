"""Tests for mcp_server dispatch and the tool error boundary."""

import logging
import time
from unittest.mock import MagicMock

import pytest

from mcp_context_memory.mcp_server import (
    MANAGE_ACTIONS,
    QUERY_ACTIONS,
    _inject_latency,
    guarded,
    run_manage,
    run_query,
)
from mcp_context_memory.models.mcp_inputs import ManageParams, QueryParams
from mcp_context_memory.services.memory_service import MemoryService
from mcp_context_memory.services.query_service import QueryService
from mcp_context_memory.services.stats_tracker import StatisticsTracker
from mcp_context_memory.storage.memory_store import MemoryStore
from mcp_context_memory.utils.errors import NotFoundError, UnsupportedOperationError


@pytest.fixture
def services():
    store = MemoryStore()
    tracker = StatisticsTracker()
    return MemoryService(store, tracker), QueryService(store, tracker)


def manage(service, **kwargs) -> str:
    return guarded("memory_manage", lambda: run_manage(service, ManageParams(**kwargs)))


def query(service, **kwargs) -> str:
    return guarded("memory_query", lambda: run_query(service, QueryParams(**kwargs)))


class TestRunManage:
    def test_full_lifecycle(self, services):
        memory_service, query_service = services

        assert manage(memory_service, action="create_topic", topic="Notes").startswith("✅")
        created = manage(memory_service, action="create_entry", topic="Notes", content="hello", importance="high")
        assert "now has 1 entries" in created

        entry_id = query_service.view_topic("Notes").entries[0].id
        updated = manage(memory_service, action="update_entry", topic="Notes", entry_id=entry_id, content="bye")
        assert "Content: bye" in updated

        assert "Entry deleted" in manage(memory_service, action="delete_entry", topic="Notes", entry_id=entry_id)
        assert manage(memory_service, action="delete_topic", topic="Notes").startswith("⚠️")
        deleted = manage(memory_service, action="delete_topic", topic="Notes", confirm=True)
        assert "0 topic(s) remain" in deleted

    def test_duplicate_topic_is_a_notice(self, services):
        memory_service, _ = services
        manage(memory_service, action="create_topic", topic="Notes")
        assert "already exists" in manage(memory_service, action="create_topic", topic="Notes")

    def test_update_topic(self, services):
        memory_service, _ = services
        manage(memory_service, action="create_topic", topic="Notes")
        text = manage(memory_service, action="update_topic", topic="Notes", description="D", tags="a,b")
        assert "Description: D" in text
        assert "Tags: a, b" in text

    def test_empty_content(self, services):
        memory_service, _ = services
        manage(memory_service, action="create_topic", topic="Notes")
        assert "Entry content must not be empty" in manage(memory_service, action="create_entry", topic="Notes")

    def test_unknown_action_raises_unsupported(self, services):
        memory_service, _ = services
        params = ManageParams.model_construct(action="explode", topic="Notes")
        with pytest.raises(UnsupportedOperationError) as exc_info:
            run_manage(memory_service, params)
        assert exc_info.value.supported == list(MANAGE_ACTIONS)


class TestRunQuery:
    def test_list_view_search_get(self, services):
        memory_service, query_service = services
        assert "No topics have been created yet" in query(query_service, action="list_topics")

        memory_service.create_topic("Notes")
        entry = memory_service.create_entry("Notes", "hello world", importance="high").entry

        assert "Notes" in query(query_service, action="list_topics")
        assert "hello world" in query(query_service, action="view_topic", topic="Notes", sort_by="importance")
        assert "Found 1 matching" in query(query_service, action="search", query="HELLO")
        assert entry.id in query(query_service, action="get_entry", entry_id=entry.id)

    def test_errors_become_text(self, services):
        _, query_service = services
        assert query(query_service, action="view_topic", topic="nope").startswith("❌")
        assert "Search query must not be empty" in query(query_service, action="search")
        assert "not found" in query(query_service, action="get_entry", entry_id="missing")

    def test_unknown_action_raises_unsupported(self, services):
        _, query_service = services
        params = QueryParams.model_construct(action="explode")
        with pytest.raises(UnsupportedOperationError) as exc_info:
            run_query(query_service, params)
        assert exc_info.value.supported == list(QUERY_ACTIONS)


class TestGuarded:
    def test_passes_through_result(self):
        assert guarded("op", lambda: "ok") == "ok"

    def test_expected_error_formatted(self):
        def fail():
            raise NotFoundError("topic", "T")

        assert guarded("op", fail).startswith('❌ Topic "T" does not exist')

    def test_unexpected_error_logged_and_formatted(self, caplog):
        def boom():
            raise RuntimeError("kaput")

        with caplog.at_level(logging.ERROR):
            text = guarded("memory_query", boom)

        assert text == "❌ memory_query failed: kaput"
        assert "Unexpected error in memory_query" in caplog.text

    def test_service_fault_does_not_escape(self):
        service = MagicMock()
        service.list_topics.side_effect = KeyError("broken")
        text = guarded("memory_query", lambda: run_query(service, QueryParams(action="list_topics")))
        assert text.startswith("❌ memory_query failed")


class TestLatency:
    def test_disabled_by_default(self):
        assert _inject_latency("body", time.perf_counter()) == "body"

    def test_prefix_when_enabled(self, monkeypatch):
        from mcp_context_memory.config import settings

        monkeypatch.setattr(settings.debug, "latency_metrics", True)
        text = _inject_latency("body", time.perf_counter())
        assert text.startswith("# latency_ms=")
        assert text.endswith("\nbody")
