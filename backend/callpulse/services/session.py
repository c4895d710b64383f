"""
Streaming Session Controller.

States:  IDLE ──start()──▶ WARMUP ──(deadline elapses)──▶ LIVE ──stop()──▶ IDLE
                             └──────────────stop()──────────────────────────┘

Every fragment (interim or final) is classified locally and synchronously.
Final fragments additionally go through the remote path once the session is
LIVE:

  final text ─▶ debounce (SESSION_DEBOUNCE_MS, newer final cancels older)
             ─▶ cache hit?  ── yes ─▶ replay cached result
                            └─ no  ─▶ remote classifier ─ ok ──▶ write + cache (bounded, oldest evicted)
                                                        └ error ▶ local result + coaching (source=local-fallback)

Writes are accepted only for the session that issued them: stop() cancels the
debounce timer and abandons in-flight remote calls, and any completion that
still arrives is dropped. Within a session the last *completed* write wins
unless ordered writes are enabled, in which case a write tagged with an older
fragment sequence number than the last accepted one is dropped.
"""
from __future__ import annotations

import asyncio
import re
import time
import uuid
from collections import OrderedDict, deque
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, Set

from callpulse.config import settings
from callpulse.models.coaching import WARMUP_BUNDLE, WARMUP_EMOTION
from callpulse.models.schemas import AnalysisResult, TranscriptEntry
from callpulse.services.classifier import SentimentClassifier, get_classifier, normalize_text
from callpulse.utils.logging import session_logger
from callpulse.utils.metrics import MetricsTracker, SessionMetrics

RemoteFn = Callable[[str], Awaitable[AnalysisResult]]
Listener = Callable[[Dict[str, Any]], None]

_WS_RE = re.compile(r"\s+")


class SessionState(str, Enum):
    IDLE = "idle"
    WARMUP = "warmup"
    LIVE = "live"


class SessionError(Exception):
    """Operation requires an active session."""


def cache_key(text: str) -> str:
    return _WS_RE.sub(" ", text).strip().lower()


@dataclass
class LiveSession:
    session_id: str
    warmup_deadline: float
    current_analysis: AnalysisResult
    transcript_log: Deque[TranscriptEntry]
    cache: "OrderedDict[str, AnalysisResult]" = field(default_factory=OrderedDict)
    last_processed_text: str = ""
    warmup_active: bool = True
    seq: int = 0
    last_accepted_seq: int = 0
    debounce_task: Optional[asyncio.Task] = None
    inflight: Set[asyncio.Task] = field(default_factory=set)
    closed: bool = False


class StreamingSessionController:
    def __init__(
        self,
        classifier: Optional[SentimentClassifier] = None,
        remote: Optional[RemoteFn] = None,
        *,
        warmup_seconds: Optional[float] = None,
        debounce_ms: Optional[int] = None,
        cache_capacity: Optional[int] = None,
        transcript_limit: Optional[int] = None,
        min_remote_chars: Optional[int] = None,
        ordered_writes: Optional[bool] = None,
        clock: Callable[[], float] = time.monotonic,
        metrics: Optional[MetricsTracker] = None,
        listener: Optional[Listener] = None,
    ):
        self.classifier       = classifier or get_classifier()
        self.remote           = remote
        self.warmup_seconds   = settings.SESSION_WARMUP_SECONDS if warmup_seconds is None else warmup_seconds
        self.debounce_s       = (settings.SESSION_DEBOUNCE_MS if debounce_ms is None else debounce_ms) / 1000.0
        self.cache_capacity   = settings.SESSION_CACHE_CAPACITY if cache_capacity is None else cache_capacity
        self.transcript_limit = settings.SESSION_TRANSCRIPT_LIMIT if transcript_limit is None else transcript_limit
        self.min_remote_chars = settings.SESSION_MIN_REMOTE_CHARS if min_remote_chars is None else min_remote_chars
        self.ordered_writes   = settings.SESSION_ORDERED_WRITES if ordered_writes is None else ordered_writes
        self.metrics          = metrics or MetricsTracker(settings.METRICS_LOG_PATH)
        self.listener         = listener
        self._clock           = clock
        self._session: Optional[LiveSession] = None
        self._log = session_logger("-")

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def session(self) -> Optional[LiveSession]:
        return self._session

    @property
    def state(self) -> SessionState:
        s = self._session
        if s is None:
            return SessionState.IDLE
        self._refresh_warmup(s)
        return SessionState.WARMUP if s.warmup_active else SessionState.LIVE

    def _refresh_warmup(self, s: LiveSession) -> None:
        if s.warmup_active and self._clock() >= s.warmup_deadline:
            s.warmup_active = False
            self._log.info("warmup finished, remote analysis enabled")

    def visible_analysis(self) -> Optional[AnalysisResult]:
        """What the dashboard shows: the Listening placeholder during warmup."""
        s = self._session
        if s is None:
            return None
        if self.state == SessionState.WARMUP:
            return s.current_analysis.model_copy(update={
                "emotion":         WARMUP_EMOTION,
                "suggestion":      WARMUP_BUNDLE.suggestion,
                "coaching_tips":   list(WARMUP_BUNDLE.coaching_tips),
                "phrase_examples": list(WARMUP_BUNDLE.phrase_examples),
                "warning_flags":   list(WARMUP_BUNDLE.warning_flags),
                "key_indicators":  [],
            })
        return s.current_analysis

    def snapshot(self) -> Dict[str, Any]:
        s = self._session
        visible = self.visible_analysis()
        return {
            "state":      self.state.value,
            "sessionId":  s.session_id if s else None,
            "analysis":   visible.to_wire() if visible else None,
            "transcript": [asdict(e) for e in s.transcript_log] if s else [],
        }

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self) -> str:
        if self._session is not None:
            self.stop()
        sid = uuid.uuid4().hex[:8]
        self._session = LiveSession(
            session_id       = sid,
            warmup_deadline  = self._clock() + self.warmup_seconds,
            current_analysis = self.classifier.classify(""),
            transcript_log   = deque(maxlen=self.transcript_limit),
        )
        self._log = session_logger(sid)
        self.metrics.start(sid)
        self._log.info(f"started (warmup {self.warmup_seconds:.0f}s, debounce {self.debounce_s * 1000:.0f}ms)")
        self._refresh_warmup(self._session)
        self._notify()
        return sid

    def stop(self) -> Optional[SessionMetrics]:
        s = self._session
        if s is None:
            return None
        s.closed = True
        if s.debounce_task is not None:
            s.debounce_task.cancel()
        for task in list(s.inflight):
            task.cancel()
        s.inflight.clear()
        s.cache.clear()
        self._session = None

        m = self.metrics.finish()
        if m:
            self._log.info(f"stopped: {m.summary()}")
        self._notify()
        return m

    async def wait_idle(self) -> None:
        """Wait for the pending debounce timer and remote calls of the active session."""
        s = self._session
        while s is not None and not s.closed:
            pending = [t for t in ([s.debounce_task] + list(s.inflight)) if t is not None and not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ── Ingestion ────────────────────────────────────────────────────────────

    def ingest(self, text: object, final: bool = True, speaker: str = "Customer") -> AnalysisResult:
        """Classify a speech-to-text fragment locally; final fragments may go remote.

        The remote pass needs a running event loop. Called from synchronous code,
        ingest returns the local result only.
        """
        s = self._session
        if s is None:
            raise SessionError("no active session; call start() first")

        text = normalize_text(text).strip()
        s.seq += 1
        seq = s.seq

        t0 = time.perf_counter()
        local = self.classifier.classify(text)
        self.metrics.record_local((time.perf_counter() - t0) * 1000)
        self._write(s, local, seq)

        if not final or not text:
            return local

        s.transcript_log.append(TranscriptEntry(
            speaker   = speaker,
            text      = text,
            timestamp = datetime.now().strftime("%H:%M:%S"),
            emotion   = local.emotion,
            score     = local.sentiment_score,
        ))

        self._refresh_warmup(s)
        if s.warmup_active:
            self._log.debug("warmup: remote analysis suppressed")
        elif self._remote_eligible(s, text):
            self._schedule(s, text, seq)
        return local

    def _remote_eligible(self, s: LiveSession, text: str) -> bool:
        return (
            self.remote is not None
            and len(text) >= self.min_remote_chars
            and text != s.last_processed_text
        )

    def _schedule(self, s: LiveSession, text: str, seq: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._log.debug("no running event loop: remote analysis skipped")
            return
        if s.debounce_task is not None and not s.debounce_task.done():
            s.debounce_task.cancel()
        s.debounce_task = loop.create_task(self._debounced(s, text, seq))

    # ── Remote path ──────────────────────────────────────────────────────────

    async def _debounced(self, s: LiveSession, text: str, seq: int) -> None:
        await asyncio.sleep(self.debounce_s)
        if s.closed:
            return

        # Past the quiet period: hand over from the debounce slot to in-flight.
        task = asyncio.current_task()
        if s.debounce_task is task:
            s.debounce_task = None
        if task is not None:
            s.inflight.add(task)
        try:
            await self._analyze_remote(s, text, seq)
        finally:
            s.inflight.discard(task)

    async def _analyze_remote(self, s: LiveSession, text: str, seq: int) -> None:
        key = cache_key(text)
        cached = s.cache.get(key)
        if cached is not None:
            s.cache.move_to_end(key)
            self.metrics.record_cache_hit()
            self._log.debug(f"cache hit: '{text[:40]}'")
            s.last_processed_text = text
            self._write(s, cached.model_copy(update={"source": "cache"}), seq)
            return

        t0 = time.perf_counter()
        try:
            result = await self.remote(text)
        except Exception as e:
            if s.closed:
                return
            self.metrics.record_remote((time.perf_counter() - t0) * 1000, ok=False)
            self._log.warning(f"remote analysis failed, using local result — {e}")
            self._write(s, self.classifier.fallback(text), seq)
            return

        if s.closed:
            self._log.debug("remote result arrived after stop, dropped")
            return
        self.metrics.record_remote((time.perf_counter() - t0) * 1000, ok=True)
        s.cache[key] = result
        while len(s.cache) > self.cache_capacity:
            s.cache.popitem(last=False)
        s.last_processed_text = text
        self._write(s, result, seq)

    # ── Writes ───────────────────────────────────────────────────────────────

    def _write(self, s: LiveSession, result: AnalysisResult, seq: int) -> bool:
        if s.closed or s is not self._session:
            return False
        if self.ordered_writes and seq < s.last_accepted_seq:
            self.metrics.record_stale_drop()
            self._log.debug(f"stale write dropped (seq {seq} < {s.last_accepted_seq})")
            return False
        s.current_analysis = result
        s.last_accepted_seq = max(s.last_accepted_seq, seq)
        self._notify()
        return True

    def _notify(self) -> None:
        if self.listener is not None:
            self.listener(self.snapshot())

    @property
    def transcript(self) -> List[TranscriptEntry]:
        return list(self._session.transcript_log) if self._session else []
