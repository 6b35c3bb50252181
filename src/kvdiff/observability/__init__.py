"""Diff observability — structured telemetry for detection cycles.

All events are frozen dataclasses with nanosecond timestamps, stored in a
bounded, thread-safe ``EventLog``.

Quick Start:
    >>> from kvdiff.observability import DiffCollector, EventLog
    >>> log = EventLog()
    >>> collector = DiffCollector(log)
    >>> # Pass collector to StyleBinding / MappingWatcher

"""

from kvdiff.observability.collector import DiffCollector
from kvdiff.observability.events import (
    DiffEvent,
    MappingDiffed,
    SourceLoaded,
    now_ns,
)
from kvdiff.observability.log import EventLog

__all__ = [
    "DiffCollector",
    "DiffEvent",
    "EventLog",
    "MappingDiffed",
    "SourceLoaded",
    "now_ns",
]
