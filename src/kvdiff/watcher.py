"""Mapping watcher — triggers a detection cycle when a source file changes.

Watches a single mapping source file (YAML, TOML, or JSON).  Each change
batch touching the file becomes one ``MappingCycle``:

- File created or modified -> reload -> cycle carries the new mapping
- File deleted -> cycle carries ``None`` (the differ reports all keys removed)

The watcher runs watchfiles in a background thread and bridges change
batches to a queue consumed by ``cycles()`` on the caller's thread, so
every ``diff()`` still happens on a single thread.
"""

from __future__ import annotations

import queue
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, watch

from kvdiff._errors import KvDiffError, SourceError
from kvdiff.source import load_mapping

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from kvdiff._types import EntryValue
    from kvdiff.config import KvDiffConfig
    from kvdiff.observability.collector import DiffCollector

type CycleKind = Literal["initial", "created", "modified", "deleted"]


@dataclass(frozen=True, slots=True)
class MappingCycle:
    """One detection cycle's input, produced by the watcher.

    Attributes:
        path: Absolute path to the watched source file.
        kind: What happened to the file to trigger this cycle.
        mapping: The freshly loaded mapping, or None if the file is gone.

    """

    path: Path
    kind: CycleKind
    mapping: dict[str, EntryValue] | None


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def batch_kind(
    path: Path, raw_changes: Iterable[tuple[Change, str]]
) -> Literal["created", "modified", "deleted"] | None:
    """Collapse one watchfiles batch into a single kind for ``path``.

    Returns None if the batch does not touch ``path``.  A batch is an
    unordered set, so the file's current existence decides between
    deleted and created/modified.

    """
    kinds = {
        _CHANGE_KIND_MAP.get(change, "modified")
        for change, path_str in raw_changes
        if Path(path_str) == path
    }
    if not kinds:
        return None
    if not path.exists():
        return "deleted"
    if "created" in kinds:
        return "created"
    return "modified"


class MappingWatcher:
    """Watches a mapping source file and yields detection-cycle inputs.

    Args:
        path: Source file to watch (resolved against ``config.root``).
        config: Supplies root, debounce and step settings.
        collector: Optional collector that records each (re)load.

    """

    def __init__(
        self,
        path: str | Path,
        config: KvDiffConfig,
        *,
        collector: DiffCollector | None = None,
    ) -> None:
        self._path = config.resolve(path)
        self._config = config
        self._collector = collector
        self._queue: queue.Queue[Literal["created", "modified", "deleted"]] = queue.Queue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._error: OSError | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching for file changes in a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._error = None
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="kvdiff-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def cycles(self) -> Iterator[MappingCycle]:
        """Yield the initial cycle, then one cycle per change to the file.

        Cycles whose source fails to load are reported on stderr and
        skipped; the watcher keeps running.

        Raises:
            SourceError: If the watch itself failed (e.g., the source
                directory does not exist).

        """
        initial = self.load("initial" if self._path.exists() else "deleted")
        if initial is not None:
            yield initial

        while self.is_running or not self._queue.empty():
            try:
                kind = self._queue.get(timeout=0.5)
            except queue.Empty:
                continue
            cycle = self.load(kind)
            if cycle is not None:
                yield cycle

        if self._error is not None:
            msg = f"cannot watch {self._path.parent}: {self._error}"
            raise SourceError(msg) from self._error

    def load(self, kind: CycleKind) -> MappingCycle | None:
        """Build the cycle for ``kind``, loading the file unless it was deleted."""
        if kind == "deleted":
            return MappingCycle(path=self._path, kind=kind, mapping=None)

        start = time.perf_counter()
        try:
            mapping = load_mapping(self._path)
        except KvDiffError as exc:
            print(f"  Source error: {self._path.name}: {exc}", file=sys.stderr)
            return None
        load_ms = (time.perf_counter() - start) * 1000

        if self._collector is not None:
            self._collector.record_load(str(self._path), keys=len(mapping), load_ms=load_ms)
        return MappingCycle(path=self._path, kind=kind, mapping=mapping)

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and push change kinds to the queue."""
        watched = self._path

        try:
            for raw_changes in watch(
                watched.parent,
                watch_filter=lambda _change, path_str: Path(path_str) == watched,
                stop_event=self._stop_event,
                debounce=self._config.debounce,
                step=self._config.step,
                recursive=False,
            ):
                kind = batch_kind(watched, raw_changes)
                if kind is not None:
                    self._queue.put(kind)
        except OSError as exc:
            # Re-raised on the consumer's thread by cycles()
            self._error = exc
