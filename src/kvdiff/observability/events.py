"""Event model for diff observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MappingDiffed:
    """A detection cycle produced a non-empty change set.

    Attributes:
        name: Name of the binding (or source) that ran the cycle.
        added: Number of added entries.
        changed: Number of changed entries.
        removed: Number of removed entries.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    name: str
    added: int
    changed: int
    removed: int
    timestamp_ns: int

    @property
    def total(self) -> int:
        """Total number of change records in the cycle."""
        return self.added + self.changed + self.removed


@dataclass(frozen=True, slots=True)
class SourceLoaded:
    """A mapping source file was (re)loaded.

    Attributes:
        path: Path to the source file.
        keys: Number of keys in the loaded mapping (0 if deleted).
        load_ms: Time spent reading and parsing in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    keys: int
    load_ms: float
    timestamp_ns: int


type DiffEvent = MappingDiffed | SourceLoaded


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
