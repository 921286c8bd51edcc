"""Business logic: management, queries and statistics."""

from .memory_service import MemoryService
from .query_service import QueryService
from .stats_tracker import StatisticsTracker

__all__ = ["MemoryService", "QueryService", "StatisticsTracker"]
