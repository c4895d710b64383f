"""
Global configuration — override via environment variables or .env file.
"""
from __future__ import annotations
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Server ──────────────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173", "*"]
    LOG_LEVEL: str = "INFO"

    # ── Live session ────────────────────────────────────────────────────────
    SESSION_WARMUP_SECONDS: float = 15.0   # remote path suppressed while calibrating
    SESSION_DEBOUNCE_MS: int = 500
    SESSION_CACHE_CAPACITY: int = 50
    SESSION_TRANSCRIPT_LIMIT: int = 10
    SESSION_MIN_REMOTE_CHARS: int = 3
    SESSION_ORDERED_WRITES: bool = False   # True → drop writes older than the last accepted one

    # ── Remote classifier (LLM) ─────────────────────────────────────────────
    REMOTE_ENABLED: bool = True
    OLLAMA_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "qwen2.5:1.5b"
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-haiku-4-5-20251001"
    REMOTE_TIMEOUT_S: float = 20.0

    # ── Metrics ─────────────────────────────────────────────────────────────
    METRICS_LOG_PATH: str = "logs/metrics.jsonl"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
