"""Shared Pydantic types and validators for reuse across models.

Centralises tag normalisation, topic-name and limit constraints, and the
Literal enums so every model speaks the same language.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, Field

# ---------------------------------------------------------------------------
# Tag normalisation
# ---------------------------------------------------------------------------


def normalize_tags(v: Any) -> list[str]:
    """Accept ``str | list | None`` and return a clean ``list[str]``.

    * ``"a, b, c"`` → ``["a", "b", "c"]``
    * ``["a", None, " b "]`` → ``["a", "b"]``
    * ``None`` → ``[]``
    """
    if v is None:
        return []
    if isinstance(v, str):
        return [t.strip() for t in v.split(",") if t.strip()]
    if isinstance(v, list):
        return [s for item in v if item is not None and (s := str(item).strip())]
    return []


Tags = Annotated[list[str], BeforeValidator(normalize_tags)]
"""Flexible tag input: accepts str, list, or None; always outputs list[str]."""


def _none_to_empty_dict(v: Any) -> Any:
    return {} if v is None else v


Metadata = Annotated[dict[str, Any], BeforeValidator(_none_to_empty_dict)]
"""Free-form entry metadata; ``None`` is treated as an empty mapping."""


# ---------------------------------------------------------------------------
# String and numeric constraints
# ---------------------------------------------------------------------------

TOPIC_NAME_MAX_LENGTH = 100

TopicName = Annotated[str, Field(min_length=1, max_length=TOPIC_NAME_MAX_LENGTH)]
"""Topic key: 1–100 characters."""

LIMIT_MIN = 1
LIMIT_MAX = 100

Limit = Annotated[int, Field(ge=LIMIT_MIN, le=LIMIT_MAX)]
"""Result count limit for view/search."""

DEFAULT_LIMIT = 20


# ---------------------------------------------------------------------------
# Literal enums
# ---------------------------------------------------------------------------

Importance = Literal["low", "medium", "high"]
ImportanceFilter = Literal["all", "low", "medium", "high"]
SortBy = Literal["time", "importance"]

DEFAULT_IMPORTANCE: Importance = "medium"

IMPORTANCE_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}
"""Ordinal rank used when sorting by importance (higher sorts first)."""

ManageAction = Literal[
    "create_topic",
    "create_entry",
    "update_topic",
    "update_entry",
    "delete_topic",
    "delete_entry",
]
QueryAction = Literal["list_topics", "view_topic", "search", "get_entry"]
