#!/usr/bin/env python3
"""FastMCP server for the context memory store.

Exposes three tools to agents:

* ``memory_manage`` - create, update and delete topics and entries
* ``memory_query`` - list topics, view a topic, search entries, fetch by id
* ``memory_stats`` - counters, averages and importance distribution

Each tool validates its arguments with a Pydantic input model, dispatches on
``action`` to the shared services and returns a single text block.  Expected
failures and unexpected faults are both turned into text here; nothing is
raised past a tool call.
"""

import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, get_args

from fastmcp import Context, FastMCP
from pydantic import ValidationError

from .config import settings
from .formatters import text as fmt
from .models.mcp_inputs import ManageParams, QueryParams, describe_validation_error
from .models.validators import ManageAction, QueryAction
from .services.memory_service import MemoryService
from .services.query_service import QueryService
from .shared_store import get_shared_store, get_shared_tracker
from .utils.errors import MemoryStoreError, UnsupportedOperationError

# Configure logging (stderr, so the stdio transport stays clean)
logging.basicConfig(level=settings.logging.level)
logger = logging.getLogger(__name__)

MANAGE_ACTIONS: tuple[str, ...] = get_args(ManageAction)
QUERY_ACTIONS: tuple[str, ...] = get_args(QueryAction)


def _inject_latency(response: str, start: float) -> str:
    """Prepend a '# latency_ms=N.N' comment line if metrics are enabled."""
    if not settings.debug.latency_metrics:
        return response
    elapsed = round((time.perf_counter() - start) * 1000, 1)
    return f"# latency_ms={elapsed}\n{response}"


@dataclass
class MCPServerContext:
    """Application context for the MCP server with all required components."""

    memory_service: MemoryService
    query_service: QueryService


@asynccontextmanager
async def mcp_server_lifespan(server: FastMCP) -> AsyncIterator[MCPServerContext]:
    """Bind the services to the process-wide store for the session."""
    store = get_shared_store()
    tracker = get_shared_tracker()
    logger.debug("MCP session started (%d topics in store)", len(store))

    yield MCPServerContext(
        memory_service=MemoryService(store, tracker),
        query_service=QueryService(store, tracker),
    )


# Create FastMCP server instance
mcp = FastMCP(settings.server.name, lifespan=mcp_server_lifespan)


# =============================================================================
# DISPATCH
# =============================================================================


def run_manage(service: MemoryService, params: ManageParams) -> str:
    """Execute one ``memory_manage`` action and render the outcome."""
    if params.action == "create_topic":
        return fmt.format_topic_created(service.create_topic(params.topic, params.description, params.tags))
    elif params.action == "create_entry":
        result = service.create_entry(
            topic=params.topic,
            content=params.content,
            importance=params.importance,
            context=params.context,
            metadata=params.metadata,
        )
        return fmt.format_entry_created(result)
    elif params.action == "update_topic":
        return fmt.format_topic_updated(service.update_topic(params.topic, params.description, params.tags))
    elif params.action == "update_entry":
        result = service.update_entry(
            topic=params.topic,
            entry_id=params.entry_id,
            content=params.content,
            importance=params.importance,
            context=params.context,
            metadata=params.metadata,
        )
        return fmt.format_entry_updated(result)
    elif params.action == "delete_topic":
        return fmt.format_topic_deleted(service.delete_topic(params.topic, confirm=params.confirm))
    elif params.action == "delete_entry":
        return fmt.format_entry_deleted(service.delete_entry(params.topic, params.entry_id))
    raise UnsupportedOperationError(params.action, MANAGE_ACTIONS)


def run_query(service: QueryService, params: QueryParams) -> str:
    """Execute one ``memory_query`` action and render the outcome."""
    if params.action == "list_topics":
        return fmt.format_topic_list(service.list_topics())
    elif params.action == "view_topic":
        return fmt.format_topic_view(service.view_topic(params.topic, sort_by=params.sort_by, limit=params.limit))
    elif params.action == "search":
        result = service.search(params.query, importance=params.importance, limit=params.limit)
        return fmt.format_search(result)
    elif params.action == "get_entry":
        return fmt.format_entry_detail(service.get_entry(params.entry_id))
    raise UnsupportedOperationError(params.action, QUERY_ACTIONS)


def guarded(operation: str, fn: Callable[[], str]) -> str:
    """Run *fn*, converting every exception into a text block."""
    try:
        return fn()
    except MemoryStoreError as e:
        logger.debug("%s rejected: %s", operation, e)
        return fmt.format_error(e)
    except ValidationError as e:
        return fmt.format_validation_error(describe_validation_error(e))
    except Exception as e:
        logger.exception("Unexpected error in %s", operation)
        return fmt.format_failure(operation, e)


# =============================================================================
# TOOLS
# =============================================================================


@mcp.tool()
async def memory_manage(
    action: str,
    topic: str,
    ctx: Context,
    description: str = "",
    tags: str | list[str] | None = None,
    content: str = "",
    importance: str = "medium",
    context: str = "",
    metadata: dict[str, Any] | None = None,
    entry_id: str = "",
    confirm: bool = False,
) -> str:
    """Create, update and delete memory topics and their entries.

    Create a topic first, then add entries to it.

    Args:
        action: One of "create_topic", "create_entry", "update_topic",
            "update_entry", "delete_topic", "delete_entry"
        topic: Topic name (1-100 characters), e.g. "Project notes"
        description: Topic description (create_topic/update_topic)
        tags: Topic tags, accepts ["tag1", "tag2"] or "tag1,tag2"
        content: Entry text, required for create_entry
        importance: Entry importance: "low", "medium" (default) or "high"
        context: Background or source of the entry
        metadata: Extra structured data; merged key by key on update_entry
        entry_id: Entry id, required for update_entry/delete_entry
        confirm: Must be true for delete_topic to actually delete

    Empty values mean "leave unchanged" for the update actions, and
    importance "medium" is treated as no change on update_entry.

    Returns:
        A text block describing the result or the error.
    """
    _t0 = time.perf_counter()

    if action not in MANAGE_ACTIONS:
        return _inject_latency(fmt.format_error(UnsupportedOperationError(action, MANAGE_ACTIONS)), _t0)

    try:
        params = ManageParams(
            action=action,
            topic=topic,
            description=description,
            tags=tags,
            content=content,
            importance=importance,
            context=context,
            metadata=metadata,
            entry_id=entry_id,
            confirm=confirm,
        )
    except ValidationError as e:
        return _inject_latency(fmt.format_validation_error(describe_validation_error(e)), _t0)

    memory_service = ctx.request_context.lifespan_context.memory_service
    return _inject_latency(guarded("memory_manage", lambda: run_manage(memory_service, params)), _t0)


@mcp.tool()
async def memory_query(
    action: str,
    ctx: Context,
    topic: str = "",
    query: str = "",
    importance: str = "all",
    sort_by: str = "time",
    limit: int = 20,
    entry_id: str = "",
) -> str:
    """Query stored memories: list topics, view a topic, search, or fetch by id.

    Args:
        action: One of "list_topics", "view_topic", "search", "get_entry"
        topic: Topic to view (view_topic)
        query: Keyword matched case-insensitively against entry content,
            context and metadata values (search)
        importance: Filter for search: "all" (default), "low", "medium", "high"
        sort_by: Entry order for view_topic: "time" (newest first, default)
            or "importance" (high first)
        limit: Maximum entries/results to return, 1-100 (default: 20)
        entry_id: Entry id (get_entry)

    Returns:
        A text block with the results or the error.
    """
    _t0 = time.perf_counter()

    if action not in QUERY_ACTIONS:
        return _inject_latency(fmt.format_error(UnsupportedOperationError(action, QUERY_ACTIONS)), _t0)

    try:
        params = QueryParams(
            action=action,
            topic=topic,
            query=query,
            importance=importance,
            sort_by=sort_by,
            limit=limit,
            entry_id=entry_id,
        )
    except ValidationError as e:
        return _inject_latency(fmt.format_validation_error(describe_validation_error(e)), _t0)

    query_service = ctx.request_context.lifespan_context.query_service
    return _inject_latency(guarded("memory_query", lambda: run_query(query_service, params)), _t0)


@mcp.tool()
async def memory_stats(ctx: Context) -> str:
    """Get memory statistics: topic and entry counts, memory footprint,
    average entry size, importance distribution and access counters.

    Returns:
        A text block with the statistics.
    """
    _t0 = time.perf_counter()
    query_service = ctx.request_context.lifespan_context.query_service
    return _inject_latency(guarded("memory_stats", lambda: fmt.format_stats(query_service.stats())), _t0)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main():
    """Main entry point for the context memory MCP server."""
    server_settings = settings.server

    if server_settings.transport == "stdio":
        logger.info("Starting %s on stdio", server_settings.name)
        mcp.run(transport="stdio")
    else:
        logger.info("Starting %s on %s:%d", server_settings.name, server_settings.host, server_settings.port)
        mcp.run(transport="http", host=server_settings.host, port=server_settings.port, stateless_http=True)


if __name__ == "__main__":
    main()
