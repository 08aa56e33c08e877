"""Event log — bounded, thread-safe store of commit events.

The watcher's render thread appends while other threads may read, so
every method takes the lock.
"""

import threading
from collections import Counter, deque
from typing import Any

from glance.observability.events import CommitEvent


class EventLog:
    """Ring buffer of commit events with simple queries.

    Args:
        max_events: Maximum number of events to retain; the oldest are
            dropped once the buffer is full.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 1_000) -> None:
        self._max_events = max_events
        self._events: deque[CommitEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: CommitEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        limit: int = 100,
    ) -> list[CommitEvent]:
        """Return matching events, most recent first."""
        with self._lock:
            events = list(self._events)

        results: list[CommitEvent] = []
        for event in reversed(events):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if since_ns and event.timestamp_ns < since_ns:
                continue
            results.append(event)
        return results

    def recent(self, n: int = 20) -> list[CommitEvent]:
        """Return the N most recent events, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def clear(self) -> int:
        """Drop all events and return how many there were."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            counts = Counter(type(event).__name__ for event in self._events)
            total = len(self._events)
        return {
            "total": total,
            "max_events": self._max_events,
            "by_type": dict(counts),
        }
