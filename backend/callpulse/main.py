"""
CallPulse — real-time call sentiment & agent coaching API.

Start:
    uvicorn callpulse.main:app --reload --host 0.0.0.0 --port 8000
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from callpulse.config import settings
from callpulse.api.routes import router
from callpulse.api.websocket import ws_router
from callpulse.services.classifier import get_classifier
from callpulse.utils.logging import setup_logging
from callpulse.utils.logging import logger

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title       = "CallPulse",
    version     = "0.1.0",
    description = (
        "Utterance → Lexicon polarity → Rule-based emotion resolution → "
        "Agent coaching, with a debounced LLM pass for live sessions"
    ),
    docs_url    = "/docs",
    redoc_url   = "/redoc",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins     = settings.ALLOWED_ORIGINS,
    allow_credentials = True,
    allow_methods     = ["*"],
    allow_headers     = ["*"],
)

# ── Routes ────────────────────────────────────────────────────────────────────
app.include_router(router,    prefix="/api",  tags=["Analysis"])
app.include_router(ws_router,                 tags=["WebSocket"])


# ── Startup: load the lexicon once ───────────────────────────────────────────
@app.on_event("startup")
async def _warmup():
    classifier = get_classifier()
    classifier.classify("warming up the lexicon")
    if classifier.lexicon.available:
        logger.info("Lexicon: VADER loaded")
    else:
        logger.warning("Lexicon: unavailable — keyword-only classification")


# ── Health ───────────────────────────────────────────────────────────────────
@app.get("/health", tags=["System"])
async def health():
    return {
        "status":         "ok",
        "lexicon":        get_classifier().lexicon.available,
        "remote_enabled": settings.REMOTE_ENABLED,
        "warmup_seconds": settings.SESSION_WARMUP_SECONDS,
    }
