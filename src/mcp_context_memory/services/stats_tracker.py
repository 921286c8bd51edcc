"""Process-wide usage counters for the memory store."""

import logging
from dataclasses import asdict, dataclass
from typing import Literal

from ..models.memory import MemoryEntry, Topic
from ..utils.ids import now, size_of

logger = logging.getLogger(__name__)

StatsEvent = Literal["add_topic", "add_entry", "remove_topic", "remove_entry"]


@dataclass
class StatsCounters:
    """The five tracked counters."""

    total_topics: int = 0
    total_entries: int = 0
    total_size: int = 0
    last_access_time: str | None = None
    access_count: int = 0


class StatisticsTracker:
    """Counts topics, entries and serialized size as mutations happen.

    ``record()`` is called after every successful mutation. Each call bumps
    the access count and last-access time, then adjusts the counters the
    event touches. Removing a topic also subtracts the entries it held.
    """

    def __init__(self, clamp_counters: bool = True):
        self.clamp_counters = clamp_counters
        self._counters = StatsCounters()

    def record(
        self,
        event: StatsEvent,
        topic: Topic | None = None,
        entry: MemoryEntry | None = None,
    ) -> None:
        c = self._counters
        c.last_access_time = now()
        c.access_count += 1

        if event == "add_topic":
            c.total_topics += 1
        elif event == "add_entry":
            c.total_entries += 1
            if entry is not None:
                c.total_size += size_of(entry)
        elif event == "remove_topic":
            self._decrement("total_topics", 1)
            if topic is not None and topic.entries:
                self._decrement("total_entries", len(topic.entries))
                self._decrement("total_size", sum(size_of(e) for e in topic.entries))
        elif event == "remove_entry":
            self._decrement("total_entries", 1)
            if entry is not None:
                self._decrement("total_size", size_of(entry))
        else:
            logger.warning("Ignoring unknown stats event '%s'", event)
            return

        logger.debug("Stats after %s: %s", event, c)

    def _decrement(self, name: str, amount: int) -> None:
        value = getattr(self._counters, name) - amount
        if value < 0:
            if self.clamp_counters:
                logger.warning("Counter %s would drop below zero (%d); clamping to 0", name, value)
                value = 0
            else:
                logger.warning("Counter %s dropped below zero (%d)", name, value)
        setattr(self._counters, name, value)

    def resize_entry(self, delta: int) -> None:
        """Apply the size change of an entry edited in place.

        Not an access: the count and last-access time are left alone.
        """
        if delta > 0:
            self._counters.total_size += delta
        elif delta < 0:
            self._decrement("total_size", -delta)

    def snapshot(self) -> StatsCounters:
        """Return a copy of the current counters."""
        return StatsCounters(**asdict(self._counters))

    def reset(self) -> None:
        """Zero every counter."""
        self._counters = StatsCounters()
