import pytest

from callpulse.utils.metrics import MetricsTracker, SessionMetrics


def test_records_are_ignored_without_a_session(metrics: MetricsTracker) -> None:
    metrics.record_local(1.0)
    metrics.record_remote(100.0)
    metrics.record_cache_hit()
    assert metrics.current is None
    assert metrics.finish() is None
    assert metrics.load_history() == []


def test_session_lifecycle(metrics: MetricsTracker) -> None:
    metrics.start("abc123")
    metrics.record_local(2.0)
    metrics.record_local(4.0)
    metrics.record_remote(300.0, ok=True)
    metrics.record_remote(500.0, ok=False)
    metrics.record_cache_hit()
    metrics.record_stale_drop()

    m = metrics.finish()

    assert m.session_id == "abc123"
    assert m.local_analyses == 2
    assert m.mean_local_ms == pytest.approx(3.0)
    assert m.remote_calls == 2
    assert m.remote_failures == 1
    assert m.mean_remote_ms == pytest.approx(400.0)
    assert m.cache_hit_rate == pytest.approx(1 / 3)
    assert m.stale_writes_dropped == 1
    assert m.duration_ms >= 0
    assert "remote=2" in m.summary()
    assert metrics.current is None


def test_history_and_summary_stats(metrics: MetricsTracker) -> None:
    for sid, n in (("one", 2), ("two", 4)):
        metrics.start(sid)
        for _ in range(n):
            metrics.record_local(1.0)
        metrics.finish()

    history = metrics.load_history()
    assert [h["session_id"] for h in history] == ["one", "two"]
    assert [h["session_id"] for h in metrics.load_history(limit=1)] == ["two"]

    stats = metrics.summary_stats()
    assert stats["sessions"] == 2
    assert stats["local_analyses"] == {"n": 2, "total": 6, "mean": 3.0, "max": 4}
    assert stats["cache_hit_rate"] == 0.0
    assert stats["remote_failure_rate"] == 0.0


def test_pooled_rates(metrics: MetricsTracker) -> None:
    metrics.start("a")
    metrics.record_remote(100.0, ok=True)
    metrics.record_remote(100.0, ok=False)
    metrics.record_cache_hit()
    metrics.finish()
    metrics.start("b")
    metrics.record_remote(100.0, ok=True)
    metrics.record_remote(100.0, ok=True)
    metrics.record_cache_hit()
    metrics.finish()

    stats = metrics.summary_stats()
    assert stats["cache_hit_rate"] == pytest.approx(2 / 6, abs=1e-3)
    assert stats["remote_failure_rate"] == 0.25


def test_corrupt_lines_are_skipped(metrics: MetricsTracker) -> None:
    metrics.start("good")
    metrics.finish()
    with open(metrics.log_path, "a", encoding="utf-8") as out:
        out.write("{not json\n\n")

    assert [h["session_id"] for h in metrics.load_history()] == ["good"]


def test_unwritable_path_does_not_raise(tmp_path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    tracker = MetricsTracker(str(blocker / "metrics.jsonl"))

    tracker.start("abc")
    m = tracker.finish()

    assert m.session_id == "abc"


def test_empty_metrics() -> None:
    m = SessionMetrics(session_id="x")
    assert m.mean_local_ms == 0.0
    assert m.mean_remote_ms == 0.0
    assert m.cache_hit_rate == 0.0
    assert m.timestamp
