"""
WebSocket live-analysis session: /ws/session

Protocol (text frames, JSON):
──────────────────────────────────────────────────────────────────────────────
Client → Server
  { "type": "start" }
  { "type": "fragment", "text": str, "final": bool, "speaker": str? }
  { "type": "stop" }

Server → Client
  { "type": "ack",      "config": {"warmupSeconds": f, "debounceMs": i, "remote": bool} }
  { "type": "analysis", "state": "warmup"|"live"|"idle", "sessionId": str|null,
                        "analysis": AnalysisResult|null, "transcript": [...] }
  { "type": "stopped",  "metrics": {...} | null }
  { "type": "error",    "message": str }
──────────────────────────────────────────────────────────────────────────────
Interim fragments ("final": false) only drive the local classifier; final
fragments are logged to the transcript and, once warmup is over, debounced
into the remote classifier. Every accepted write is pushed as an "analysis"
frame, including late remote results.
"""
from __future__ import annotations
import asyncio
import json
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from callpulse.config import settings
from callpulse.services.classifier import get_classifier
from callpulse.services.remote_classifier import RemoteClassifier
from callpulse.services.session import SessionError, StreamingSessionController
from callpulse.utils.logging import logger

ws_router = APIRouter()

_remote: Optional[RemoteClassifier] = None


def _get_remote() -> Optional[RemoteClassifier]:
    global _remote
    if not settings.REMOTE_ENABLED:
        return None
    _remote = _remote or RemoteClassifier(local=get_classifier())
    return _remote


# ── Helpers ──────────────────────────────────────────────────────────────────

async def _send(ws: WebSocket, payload: dict) -> None:
    try:
        await ws.send_text(json.dumps(payload, ensure_ascii=False))
    except Exception as e:
        logger.debug(f"WS: send dropped — {e}")


async def _pump(ws: WebSocket, outbox: "asyncio.Queue[dict]") -> None:
    while True:
        payload = await outbox.get()
        await _send(ws, payload)


# ── WebSocket handler ────────────────────────────────────────────────────────

@ws_router.websocket("/ws/session")
async def session_ws(ws: WebSocket):
    await ws.accept()
    outbox: "asyncio.Queue[dict]" = asyncio.Queue()
    sender = asyncio.create_task(_pump(ws, outbox))

    controller = StreamingSessionController(
        classifier = get_classifier(),
        remote     = _get_remote(),
        listener   = lambda snap: outbox.put_nowait({"type": "analysis", **snap}),
    )
    logger.info("[WS] session socket connected")

    try:
        async for raw in ws.iter_text():
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                outbox.put_nowait({"type": "error", "message": "Frames must be JSON objects."})
                continue
            t = msg.get("type") if isinstance(msg, dict) else None

            # ── start ────────────────────────────────────────────────────────
            if t == "start":
                outbox.put_nowait({"type": "ack", "config": {
                    "warmupSeconds": controller.warmup_seconds,
                    "debounceMs":    int(controller.debounce_s * 1000),
                    "remote":        controller.remote is not None,
                }})
                controller.start()

            # ── fragment ─────────────────────────────────────────────────────
            elif t == "fragment":
                try:
                    controller.ingest(
                        msg.get("text", ""),
                        final   = bool(msg.get("final", True)),
                        speaker = str(msg.get("speaker") or "Customer"),
                    )
                except SessionError as e:
                    outbox.put_nowait({"type": "error", "message": str(e)})

            # ── stop ─────────────────────────────────────────────────────────
            elif t == "stop":
                m = controller.stop()
                outbox.put_nowait({"type": "stopped", "metrics": asdict(m) if m else None})

            else:
                outbox.put_nowait({"type": "error", "message": f"Unknown frame type: {t!r}"})

    except WebSocketDisconnect:
        logger.info("[WS] session socket disconnected")
    finally:
        controller.stop()
        sender.cancel()
