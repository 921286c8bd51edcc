"""MCP tool input models.

Each MCP tool function validates its inputs by constructing the
corresponding model. Field defaults, range limits and enumerations all
live here as declarative constraints.  Requirements that depend on the
action (non-empty content, query, entry id) are enforced by the services so
that they surface as the same invalid-input errors for every caller.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from .validators import (
    DEFAULT_IMPORTANCE,
    DEFAULT_LIMIT,
    Importance,
    ImportanceFilter,
    Limit,
    ManageAction,
    Metadata,
    QueryAction,
    SortBy,
    Tags,
    TopicName,
)


class ManageParams(BaseModel):
    """Validated input for the ``memory_manage`` MCP tool."""

    action: ManageAction
    topic: TopicName
    description: str = ""
    tags: Tags = []
    content: str = ""
    importance: Importance = DEFAULT_IMPORTANCE
    context: str = ""
    metadata: Metadata = Field(default_factory=dict)
    entry_id: str = ""
    confirm: bool = False


class QueryParams(BaseModel):
    """Validated input for the ``memory_query`` MCP tool."""

    action: QueryAction
    topic: str = ""
    query: str = ""
    importance: ImportanceFilter = "all"
    sort_by: SortBy = "time"
    limit: Limit = DEFAULT_LIMIT
    entry_id: str = ""


def describe_validation_error(exc: ValidationError) -> list[str]:
    """Flatten a pydantic ``ValidationError`` into ``"field: message"`` lines."""
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "input"
        lines.append(f"{location}: {error.get('msg', 'invalid value')}")
    return lines
