"""
Shared store manager for the context memory server.

Holds the single :class:`MemoryStore` and :class:`StatisticsTracker` for the
process so every MCP session (and any embedding application) sees the same
topics and counters.
"""

import logging
from threading import Lock
from typing import Optional

from .config import settings
from .services.stats_tracker import StatisticsTracker
from .storage.memory_store import MemoryStore

logger = logging.getLogger(__name__)


class StoreManager:
    """Manages the singleton store and tracker."""

    _instance: Optional["StoreManager"] = None
    _lock: Lock = Lock()

    def __init__(self):
        self._store: MemoryStore | None = None
        self._tracker: StatisticsTracker | None = None
        self._init_lock = Lock()

    @classmethod
    def get_instance(cls) -> "StoreManager":
        """Get singleton instance of StoreManager.

        Thread-safe singleton pattern ensures only one instance exists.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
                    logger.info("Created new StoreManager singleton instance")
        return cls._instance

    def _ensure_initialized(self) -> None:
        if self._store is not None:
            return
        with self._init_lock:
            if self._store is None:
                self._tracker = StatisticsTracker(clamp_counters=settings.stats.clamp_counters)
                self._store = MemoryStore()
                logger.info("Initialized in-memory store")

    @property
    def store(self) -> MemoryStore:
        self._ensure_initialized()
        return self._store

    @property
    def tracker(self) -> StatisticsTracker:
        self._ensure_initialized()
        return self._tracker

    @property
    def initialized(self) -> bool:
        return self._store is not None

    def reset(self) -> None:
        """Drop every topic and zero the counters (the store object is kept)."""
        if self._store is None:
            return
        with self._store.lock:
            self._store.clear()
            self._tracker.reset()
        logger.info("Shared store reset")


def get_shared_store() -> MemoryStore:
    """Get the process-wide store."""
    return StoreManager.get_instance().store


def get_shared_tracker() -> StatisticsTracker:
    """Get the process-wide statistics tracker."""
    return StoreManager.get_instance().tracker


def is_store_initialized() -> bool:
    """Check whether the shared store has been created yet."""
    return StoreManager.get_instance().initialized


def reset_shared_store() -> None:
    """Clear the shared store and counters."""
    StoreManager.get_instance().reset()
