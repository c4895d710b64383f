"""
Live-session analysis metrics.

Usage:
    m = MetricsTracker()
    m.start("3f9a1c2e")
    ...
    m.record_local(0.8)
    m.record_remote(640.0, ok=True)
    m.record_cache_hit()
    ...
    final = m.finish()   # SessionMetrics dataclass, appended to logs/metrics.jsonl
"""
from __future__ import annotations
import json
import os
import time
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from callpulse.utils.logging import logger


@dataclass
class SessionMetrics:
    session_id: str
    local_analyses: int = 0
    local_ms_total: float = 0.0
    remote_calls: int = 0
    remote_failures: int = 0
    remote_ms_total: float = 0.0
    cache_hits: int = 0
    stale_writes_dropped: int = 0
    duration_ms: float = 0.0
    timestamp: str = field(default_factory=lambda: time.strftime("%Y-%m-%dT%H:%M:%S"))

    @property
    def mean_local_ms(self) -> float:
        return self.local_ms_total / self.local_analyses if self.local_analyses else 0.0

    @property
    def mean_remote_ms(self) -> float:
        return self.remote_ms_total / self.remote_calls if self.remote_calls else 0.0

    @property
    def cache_hit_rate(self) -> float:
        """Share of debounced submissions served from cache instead of the remote call."""
        lookups = self.cache_hits + self.remote_calls
        return self.cache_hits / lookups if lookups else 0.0

    def summary(self) -> str:
        return (
            f"local={self.local_analyses} ({self.mean_local_ms:.1f}ms avg) "
            f"remote={self.remote_calls} ({self.mean_remote_ms:.0f}ms avg, {self.remote_failures} failed) "
            f"cache_hits={self.cache_hits} stale_dropped={self.stale_writes_dropped} "
            f"duration={self.duration_ms / 1000:.1f}s"
        )


class MetricsTracker:
    def __init__(self, log_path: str = "logs/metrics.jsonl"):
        self.log_path = log_path
        self._current: Optional[SessionMetrics] = None
        self._started_at: float = 0.0

    @property
    def current(self) -> Optional[SessionMetrics]:
        return self._current

    # ── Record ───────────────────────────────────────────────────────────────

    def start(self, session_id: str) -> "MetricsTracker":
        self._current = SessionMetrics(session_id=session_id)
        self._started_at = time.perf_counter()
        return self

    def record_local(self, ms: float) -> None:
        m = self._current
        if m is None:
            return
        m.local_analyses += 1
        m.local_ms_total += ms

    def record_remote(self, ms: float, ok: bool = True) -> None:
        m = self._current
        if m is None:
            return
        m.remote_calls += 1
        m.remote_ms_total += ms
        m.remote_failures += 0 if ok else 1

    def record_cache_hit(self) -> None:
        if self._current is not None:
            self._current.cache_hits += 1

    def record_stale_drop(self) -> None:
        if self._current is not None:
            self._current.stale_writes_dropped += 1

    def finish(self) -> Optional[SessionMetrics]:
        m, self._current = self._current, None
        if m is None:
            return None
        m.duration_ms = (time.perf_counter() - self._started_at) * 1000
        self._persist(m)
        return m

    # ── Persistence ──────────────────────────────────────────────────────────

    def _persist(self, m: SessionMetrics) -> None:
        line = json.dumps(asdict(m))
        try:
            directory = os.path.dirname(self.log_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as out:
                out.write(line + "\n")
        except OSError as e:
            logger.warning(f"Metrics: could not persist session {m.session_id} — {e}")

    def load_history(self, limit: Optional[int] = None) -> List[Dict]:
        """Persisted sessions, oldest first; unreadable lines are skipped."""
        if not os.path.exists(self.log_path):
            return []
        sessions: List[Dict] = []
        with open(self.log_path, encoding="utf-8") as src:
            for lineno, raw in enumerate(src, 1):
                if not raw.strip():
                    continue
                try:
                    sessions.append(json.loads(raw))
                except json.JSONDecodeError:
                    logger.warning(f"Metrics: skipping corrupt line {lineno} in {self.log_path}")
        return sessions[-limit:] if limit else sessions

    def summary_stats(self) -> Dict:
        """Per-counter aggregates plus pooled cache and remote-failure rates."""
        history = self.load_history()
        if not history:
            return {}

        stats: Dict = {"sessions": len(history)}
        for key in _COUNTERS:
            column = [h[key] for h in history if isinstance(h.get(key), (int, float))]
            if column:
                stats[key] = _aggregate(column)

        hits = sum(h.get("cache_hits", 0) for h in history)
        calls = sum(h.get("remote_calls", 0) for h in history)
        failures = sum(h.get("remote_failures", 0) for h in history)
        stats["cache_hit_rate"] = round(hits / (hits + calls), 3) if hits + calls else 0.0
        stats["remote_failure_rate"] = round(failures / calls, 3) if calls else 0.0
        return stats


_COUNTERS = ("local_analyses", "remote_calls", "remote_failures", "cache_hits",
             "stale_writes_dropped", "duration_ms")


def _aggregate(column: List[float]) -> Dict[str, float]:
    return {
        "n":     len(column),
        "total": round(sum(column), 1),
        "mean":  round(sum(column) / len(column), 1),
        "max":   round(max(column), 1),
    }
