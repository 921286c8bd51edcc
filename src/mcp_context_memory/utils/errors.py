"""Error taxonomy for memory store operations.

Services raise these; the MCP tool boundary turns them into text blocks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.responses import TopicSummary


class MemoryStoreError(Exception):
    """Base class for expected, caller-facing operation failures."""


class InvalidInputError(MemoryStoreError):
    """Raised when a required field is missing or empty."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"'{field}' must not be empty")


class NotFoundError(MemoryStoreError):
    """Raised when a topic or entry does not exist."""

    def __init__(self, kind: str, key: str, topic: str | None = None):
        self.kind = kind  # "topic" or "entry"
        self.key = key
        self.topic = topic

        if kind == "entry" and topic is not None:
            message = f"Entry '{key}' not found in topic '{topic}'"
        else:
            message = f"{kind.capitalize()} '{key}' not found"
        super().__init__(message)


class AlreadyExistsError(MemoryStoreError):
    """Raised when creating a topic whose name is already taken."""

    def __init__(self, existing: TopicSummary):
        self.existing = existing
        super().__init__(f"Topic '{existing.name}' already exists")


class ConfirmationRequiredError(MemoryStoreError):
    """Raised by delete_topic when the caller has not confirmed the delete."""

    def __init__(self, preview: TopicSummary):
        self.preview = preview
        super().__init__(f"Deleting topic '{preview.name}' requires confirm=true")


class UnsupportedOperationError(MemoryStoreError):
    """Raised for an action outside a tool's supported set."""

    def __init__(self, action: str, supported: list[str] | tuple[str, ...]):
        self.action = action
        self.supported = list(supported)
        super().__init__(f"Unsupported action '{action}'. Supported: {', '.join(self.supported)}")
