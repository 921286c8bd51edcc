"""Storage layer: the in-process topic store."""

from .memory_store import MemoryStore

__all__ = ["MemoryStore"]
