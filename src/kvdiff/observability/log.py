"""Event log — queryable, thread-safe store of diff telemetry.

Keeps a bounded ring buffer of ``MappingDiffed`` and ``SourceLoaded``
events.  Queries can narrow by event type, time, binding name / source
path, and by change bucket (e.g. only cycles that removed something).

Thread Safety:
    All methods are protected by a ``threading.Lock``.  The watcher may
    record loads while the consumer thread reads stats.

"""

import threading
from collections import deque
from typing import Any

from kvdiff._types import ChangeKind
from kvdiff.observability.events import DiffEvent, MappingDiffed, SourceLoaded


def _label(event: DiffEvent) -> str:
    """The binding name of a diff event, or the path of a load event."""
    match event:
        case MappingDiffed(name=name):
            return name
        case SourceLoaded(path=path):
            return path
    return ""


def _bucket_count(event: MappingDiffed, kind: ChangeKind) -> int:
    match kind:
        case "added":
            return event.added
        case "changed":
            return event.changed
        case "removed":
            return event.removed


class EventLog:
    """Bounded event store with query support.

    When the buffer is full, the oldest events are discarded.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[DiffEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: DiffEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type[MappingDiffed] | type[SourceLoaded] | None = None,
        since_ns: int = 0,
        name: str | None = None,
        kind: ChangeKind | None = None,
        limit: int = 100,
    ) -> list[DiffEvent]:
        """Query events with optional filters.

        Args:
            event_type: Only return events of this type.
            since_ns: Only return events recorded at or after this timestamp.
            name: Substring of the binding name (``MappingDiffed``) or
                source path (``SourceLoaded``).
            kind: Only return diff cycles with at least one record in this
                bucket.  Implies ``MappingDiffed``.
            limit: Maximum number of events to return.

        Returns:
            List of matching events, most recent first.

        """
        with self._lock:
            events = list(self._events)

        results: list[DiffEvent] = []
        for event in reversed(events):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if name is not None and name not in _label(event):
                continue
            if kind is not None and (
                not isinstance(event, MappingDiffed) or not _bucket_count(event, kind)
            ):
                continue
            results.append(event)
        return results

    def recent(self, n: int = 20) -> list[DiffEvent]:
        """Return the N most recent events, oldest first."""
        if n <= 0:
            return []
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def clear(self) -> int:
        """Clear all events and return the count that was cleared."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Summarize stored events: diff cycles, per-bucket totals, reloads."""
        with self._lock:
            events = list(self._events)

        diffed = [e for e in events if isinstance(e, MappingDiffed)]
        return {
            "total": len(events),
            "max_events": self._max_events,
            "cycles": len(diffed),
            "added": sum(e.added for e in diffed),
            "changed": sum(e.changed for e in diffed),
            "removed": sum(e.removed for e in diffed),
            "reloads": len(events) - len(diffed),
        }
