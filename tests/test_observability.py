"""Tests for kvdiff.observability — diff telemetry events and log."""

import threading

import pytest

from kvdiff.observability.collector import DiffCollector
from kvdiff.observability.events import MappingDiffed, SourceLoaded, now_ns
from kvdiff.observability.log import EventLog


def _diffed(name: str = "hero", *, added: int = 1, ts: int | None = None) -> MappingDiffed:
    return MappingDiffed(
        name=name, added=added, changed=0, removed=0,
        timestamp_ns=now_ns() if ts is None else ts,
    )


def _loaded(path: str = "/s.yaml", *, ts: int | None = None) -> SourceLoaded:
    return SourceLoaded(
        path=path, keys=3, load_ms=0.2,
        timestamp_ns=now_ns() if ts is None else ts,
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:

    def test_frozen(self) -> None:
        event = _diffed()
        with pytest.raises(AttributeError):
            event.added = 5  # type: ignore[misc]

    def test_total(self) -> None:
        event = MappingDiffed(name="x", added=1, changed=2, removed=3, timestamp_ns=0)
        assert event.total == 6

    def test_now_ns_monotonic(self) -> None:
        assert now_ns() <= now_ns()


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


def _log(*events: MappingDiffed | SourceLoaded, max_events: int = 10_000) -> EventLog:
    log = EventLog(max_events=max_events)
    for event in events:
        log.append(event)
    return log


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_diffed())
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = _log(*(_diffed(f"b{i}") for i in range(10)), max_events=5)
        assert len(log) == 5
        assert log.recent(1)[0].name == "b9"

    def test_recent(self) -> None:
        log = _log(*(_diffed(f"b{i}") for i in range(5)))
        assert [e.name for e in log.recent(3)] == ["b2", "b3", "b4"]

    @pytest.mark.parametrize("n", [0, -1])
    def test_recent_non_positive_is_empty(self, n: int) -> None:
        log = _log(_diffed(), _diffed())
        assert log.recent(n) == []

    def test_query_by_type(self) -> None:
        log = _log(_diffed(), _loaded(), _diffed())
        results = log.query(event_type=MappingDiffed)
        assert len(results) == 2
        assert all(isinstance(r, MappingDiffed) for r in results)

    def test_query_by_name_matches_binding_name_or_source_path(self) -> None:
        log = _log(_diffed("hero"), _diffed("footer"), _loaded("/site/hero.yaml"))
        results = log.query(name="hero")
        assert [type(r) for r in results] == [SourceLoaded, MappingDiffed]

    def test_query_by_kind(self) -> None:
        removing = MappingDiffed(name="a", added=0, changed=1, removed=2, timestamp_ns=1)
        adding = MappingDiffed(name="b", added=3, changed=0, removed=0, timestamp_ns=2)
        log = _log(removing, adding, _loaded())

        assert log.query(kind="removed") == [removing]
        assert log.query(kind="added") == [adding]
        assert log.query(kind="changed") == [removing]

    def test_query_since(self) -> None:
        log = _log(_diffed("old", ts=100), _diffed("new", ts=200))
        assert [e.name for e in log.query(since_ns=150)] == ["new"]
        assert [e.name for e in log.query(since_ns=200)] == ["new"]

    def test_query_newest_first_with_limit(self) -> None:
        log = _log(*(_diffed(f"b{i}") for i in range(5)))
        assert [e.name for e in log.query(limit=2)] == ["b4", "b3"]

    def test_clear(self) -> None:
        log = _log(_diffed(), _diffed())
        assert log.clear() == 2
        assert len(log) == 0

    def test_stats(self) -> None:
        log = _log(
            MappingDiffed(name="a", added=2, changed=0, removed=0, timestamp_ns=1),
            MappingDiffed(name="a", added=0, changed=1, removed=1, timestamp_ns=2),
            _loaded(),
            max_events=50,
        )
        assert log.stats() == {
            "total": 3,
            "max_events": 50,
            "cycles": 2,
            "added": 2,
            "changed": 1,
            "removed": 1,
            "reloads": 1,
        }

    def test_concurrent_appends(self) -> None:
        log = EventLog()

        def worker() -> None:
            for _ in range(200):
                log.append(_diffed())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(log) == 800


# ---------------------------------------------------------------------------
# DiffCollector
# ---------------------------------------------------------------------------


class TestDiffCollector:

    def test_default_log_created(self) -> None:
        assert isinstance(DiffCollector().log, EventLog)

    def test_record_diff(self) -> None:
        collector = DiffCollector()
        collector.record_diff("hero", added=1, changed=2, removed=3)
        (event,) = collector.log.recent()
        assert isinstance(event, MappingDiffed)
        assert (event.name, event.added, event.changed, event.removed) == ("hero", 1, 2, 3)

    def test_record_load(self) -> None:
        log = EventLog()
        collector = DiffCollector(log)
        collector.record_load("/s.yaml", keys=4, load_ms=1.5)
        (event,) = log.recent()
        assert isinstance(event, SourceLoaded)
        assert (event.path, event.keys, event.load_ms) == ("/s.yaml", 4, 1.5)
