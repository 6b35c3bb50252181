"""Key-value differ — change detection across repeated mapping samples.

Given a mapping of str keys to str-or-None values, sampled once per
detection cycle, reports which entries were added, changed, or removed
since the previous sample.  The caller never passes the previous snapshot;
the differ remembers it as a list of tracked entries.

Ordering:
    Records within each bucket follow the differ's tracking order: keys
    already tracked keep their original position, newly seen keys are
    appended in the iteration order of the input mapping.

Thread Safety:
    Not thread-safe.  Each consumer owns exactly one differ and calls
    ``diff()`` once per cycle from a single thread.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from kvdiff._errors import InvalidMappingError
from kvdiff._types import ChangeKind, EntryKey, EntryValue, RawMapping


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """Snapshot of one key's transition during a detection cycle.

    Attributes:
        key: The tracked key.
        previous_value: Value before this cycle (None for additions).
        current_value: Value after this cycle (None for removals).

    """

    key: EntryKey
    previous_value: EntryValue
    current_value: EntryValue

    def __str__(self) -> str:
        if self.previous_value == self.current_value:
            return self.key
        return f"{self.key}[{self.previous_value}->{self.current_value}]"


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """The classified output of one detection cycle.

    Attributes:
        added: Keys seen for the first time.
        changed: Tracked keys whose value differs from the previous cycle.
        removed: Tracked keys missing from this cycle's input.

    """

    added: tuple[ChangeRecord, ...] = ()
    changed: tuple[ChangeRecord, ...] = ()
    removed: tuple[ChangeRecord, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.added or self.changed or self.removed)

    def __len__(self) -> int:
        return len(self.added) + len(self.changed) + len(self.removed)

    def __iter__(self) -> Iterator[tuple[ChangeKind, ChangeRecord]]:
        """Yield ``(kind, record)`` pairs: added, then changed, then removed."""
        for record in self.added:
            yield "added", record
        for record in self.changed:
            yield "changed", record
        for record in self.removed:
            yield "removed", record

    def __str__(self) -> str:
        return (
            f"added: {', '.join(map(str, self.added))}\n"
            f"changed: {', '.join(map(str, self.changed))}\n"
            f"removed: {', '.join(map(str, self.removed))}\n"
        )


class _TrackedEntry:
    """Per-key state remembered across cycles.  Never leaves the differ."""

    __slots__ = ("current_value", "key", "maybe_dirty", "previous_value")

    def __init__(self, key: EntryKey, value: EntryValue) -> None:
        self.key = key
        self.current_value = value
        self.previous_value: EntryValue = None
        self.maybe_dirty = False

    def record(self) -> ChangeRecord:
        return ChangeRecord(self.key, self.previous_value, self.current_value)


class KeyValueDiffer:
    """Detects added, changed, and removed entries between mapping samples.

    Example:
        >>> differ = KeyValueDiffer()
        >>> differ.diff({"color": "red"}).added
        (ChangeRecord(key='color', previous_value=None, current_value='red'),)
        >>> differ.diff({"color": "red"}) is None
        True

    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        # dict preserves insertion order, which is the tracking order
        self._entries: dict[EntryKey, _TrackedEntry] = {}

    def diff(self, mapping: RawMapping | None) -> ChangeSet | None:
        """Run one detection cycle against ``mapping``.

        ``None`` is treated as an empty mapping: every tracked entry is
        reported as removed.  On a differ that tracks nothing this yields
        no change.

        Args:
            mapping: The latest sample, or None for "no data this cycle".

        Returns:
            The ChangeSet for this cycle, or None if nothing changed.

        Raises:
            InvalidMappingError: If ``mapping`` is not a Mapping of str keys
                to str-or-None values.  Tracked state is left untouched.

        """
        items = _validated_items(mapping if mapping is not None else {})

        entries = self._entries
        for entry in entries.values():
            entry.maybe_dirty = True

        added: list[ChangeRecord] = []
        changed: list[ChangeRecord] = []

        for key, value in items:
            entry = entries.get(key)
            if entry is None:
                entry = _TrackedEntry(key, value)
                entries[key] = entry
                added.append(entry.record())
                continue

            entry.maybe_dirty = False
            if value != entry.current_value:
                entry.previous_value = entry.current_value
                entry.current_value = value
                changed.append(entry.record())

        removed: list[ChangeRecord] = []
        for entry in [e for e in entries.values() if e.maybe_dirty]:
            entry.previous_value = entry.current_value
            entry.current_value = None
            removed.append(entry.record())
            del entries[entry.key]

        if not (added or changed or removed):
            return None
        return ChangeSet(tuple(added), tuple(changed), tuple(removed))

    def reset(self) -> None:
        """Forget all tracked entries; the next diff starts from scratch."""
        self._entries.clear()

    def keys(self) -> tuple[EntryKey, ...]:
        """Tracked keys in tracking order."""
        return tuple(self._entries)

    def snapshot(self) -> dict[EntryKey, EntryValue]:
        """Copy of the tracked key -> current value state."""
        return {key: entry.current_value for key, entry in self._entries.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"KeyValueDiffer(keys={list(self._entries)!r})"


def _validated_items(mapping: object) -> list[tuple[EntryKey, EntryValue]]:
    """Materialize and type-check the input before any state is mutated."""
    if not isinstance(mapping, Mapping):
        msg = f"expected a mapping, got {type(mapping).__name__}"
        raise InvalidMappingError(msg)

    items: list[tuple[EntryKey, EntryValue]] = []
    for key, value in mapping.items():
        if not isinstance(key, str):
            msg = f"mapping keys must be str, got {type(key).__name__} ({key!r})"
            raise InvalidMappingError(msg)
        if value is not None and not isinstance(value, str):
            msg = (
                f"value for {key!r} must be str or None, "
                f"got {type(value).__name__}"
            )
            raise InvalidMappingError(msg)
        items.append((key, value))
    return items
