"""
HTTP REST endpoints.

POST /api/analyze            → sentiment/emotion analysis (local, optionally remote)
POST /api/reply              → sentiment-aware opening line for a chat reply
GET  /api/coaching/{emotion} → static coaching bundle
GET  /api/metrics            → live-session metrics history
"""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from callpulse.config import settings
from callpulse.models.coaching import CoachingSynthesizer
from callpulse.models.schemas import AnalysisResult
from callpulse.services.classifier import SentimentClassifier, get_classifier
from callpulse.services.remote_classifier import RemoteClassificationError, RemoteClassifier
from callpulse.services.response_generator import generate_reply
from callpulse.utils.logging import logger
from callpulse.utils.metrics import MetricsTracker

router = APIRouter()

# ── Lazy service singletons ──────────────────────────────────────────────────
_remote:   Optional[RemoteClassifier]    = None
_coaching: Optional[CoachingSynthesizer] = None


def _get_classifier() -> SentimentClassifier:
    return get_classifier()
def _get_remote() -> RemoteClassifier:
    global _remote;   _remote   = _remote   or RemoteClassifier(local=get_classifier()); return _remote
def _get_coaching() -> CoachingSynthesizer:
    global _coaching; _coaching = _coaching or CoachingSynthesizer();                   return _coaching


# ── POST /api/analyze ────────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    transcript: str = Field(..., description="Customer statement to analyse")
    remote:     bool = Field(False, description="Try the LLM classifier first, fall back to local")


@router.post("/analyze", response_model=AnalysisResult, summary="Sentiment Analysis")
async def analyze(req: AnalyzeRequest):
    """
    Rule-based emotion + 1–10 sentiment score + coaching for one utterance.
    With `remote=true` the LLM classifier is tried first; any failure falls back
    to the local result (source = local-fallback).
    """
    if req.remote and settings.REMOTE_ENABLED:
        try:
            return await _get_remote().classify_remote(req.transcript)
        except RemoteClassificationError as e:
            logger.warning(f"Analyze: remote classifier failed, using local — {e}")
            return _get_classifier().fallback(req.transcript)
    return _get_classifier().classify(req.transcript)


# ── POST /api/reply ──────────────────────────────────────────────────────────

class ReplyRequest(BaseModel):
    message: str


class ReplyResponse(BaseModel):
    reply:     str
    sentiment: AnalysisResult


@router.post("/reply", response_model=ReplyResponse, summary="Sentiment-aware reply opener")
async def reply(req: ReplyRequest):
    sentiment = _get_classifier().classify(req.message)
    return ReplyResponse(reply=generate_reply(sentiment.emotion, req.message), sentiment=sentiment)


# ── GET /api/coaching/{emotion} ──────────────────────────────────────────────

@router.get("/coaching/{emotion}", summary="Coaching bundle for an emotion")
async def coaching(emotion: str):
    """Unknown emotions return the Neutral bundle."""
    synth = _get_coaching()
    resolved = emotion if emotion in synth.emotions() else "Neutral"
    return {"emotion": resolved, **synth.synthesize(resolved).to_wire()}


# ── GET /api/metrics ─────────────────────────────────────────────────────────

@router.get("/metrics", summary="Live-session metrics history")
async def get_metrics():
    """Return accumulated per-session metrics (from METRICS_LOG_PATH)."""
    tracker = MetricsTracker(settings.METRICS_LOG_PATH)
    return {
        "history": tracker.load_history(),
        "stats":   tracker.summary_stats(),
    }
