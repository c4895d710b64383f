"""
Structured JSON logger.

Usage:
    from callpulse.utils.logging import logger
    log = session_logger("3f9a1c2e")   # → msg prefixed with "[S 3f9a1c2e]"
"""
import logging
import sys
import json
from typing import Any, MutableMapping, Tuple


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time":   self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level":  record.levelname,
            "logger": record.name,
            "msg":    record.getMessage(),
        }
        session = getattr(record, "session", None)
        if session:
            payload["session"] = session
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class _SessionAdapter(logging.LoggerAdapter):
    """Tags every record with the live-session id (text prefix + JSON field)."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        sid = self.extra["session"]
        kwargs.setdefault("extra", {})["session"] = sid
        return f"[S {sid}] {msg}", kwargs


def setup_logging(level: str = "INFO") -> logging.Logger:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JSONFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    return logging.getLogger("callpulse")


def session_logger(session_id: str) -> logging.LoggerAdapter:
    return _SessionAdapter(logging.getLogger("callpulse.session"), {"session": session_id})


logger = setup_logging()
