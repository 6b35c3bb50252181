"""Diff collector — records detection-cycle telemetry into an EventLog.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from kvdiff.observability.events import MappingDiffed, SourceLoaded, now_ns
from kvdiff.observability.log import EventLog


class DiffCollector:
    """Event collector for bindings and mapping sources.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_diff(
        self,
        name: str,
        *,
        added: int = 0,
        changed: int = 0,
        removed: int = 0,
    ) -> None:
        """Record a non-empty detection cycle."""
        self._log.append(
            MappingDiffed(
                name=name,
                added=added,
                changed=changed,
                removed=removed,
                timestamp_ns=now_ns(),
            )
        )

    def record_load(self, path: str, *, keys: int = 0, load_ms: float = 0.0) -> None:
        """Record a mapping source (re)load."""
        self._log.append(
            SourceLoaded(
                path=path,
                keys=keys,
                load_ms=load_ms,
                timestamp_ns=now_ns(),
            )
        )
