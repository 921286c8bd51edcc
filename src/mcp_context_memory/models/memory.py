"""Topic and memory entry models.

Pydantic v2 models for the two record types held in the store.  Both carry
ISO-8601 ``created_at``/``updated_at`` strings issued by the process clock
in :mod:`mcp_context_memory.utils.ids`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..utils.ids import new_id, now
from .validators import DEFAULT_IMPORTANCE, Importance, Metadata, Tags, TopicName


class MemoryEntry(BaseModel):
    """A single stored piece of content inside a topic."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    content: str = Field(min_length=1)
    importance: Importance = DEFAULT_IMPORTANCE
    context: str = ""
    metadata: Metadata = Field(default_factory=dict)
    created_at: str = Field(default_factory=now)
    updated_at: str = ""

    def model_post_init(self, __context: Any) -> None:
        if not self.updated_at:
            self.updated_at = self.created_at

    def touch(self) -> None:
        """Update the updated_at timestamp to the current time."""
        self.updated_at = now()


class Topic(BaseModel):
    """Named container owning an ordered sequence of entries."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    name: TopicName
    description: str = ""
    tags: Tags = []
    entries: list[MemoryEntry] = Field(default_factory=list)
    created_at: str = Field(default_factory=now)
    updated_at: str = ""

    def model_post_init(self, __context: Any) -> None:
        if not self.updated_at:
            self.updated_at = self.created_at

    def touch(self) -> None:
        """Update the updated_at timestamp to the current time."""
        self.updated_at = now()

    def find_entry(self, entry_id: str) -> MemoryEntry | None:
        """Return the entry with *entry_id*, or None."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def remove_entry(self, entry_id: str) -> MemoryEntry | None:
        """Remove and return the entry with *entry_id*, or None if absent."""
        for index, entry in enumerate(self.entries):
            if entry.id == entry_id:
                return self.entries.pop(index)
        return None
