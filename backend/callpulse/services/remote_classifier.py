"""
Remote (LLM) classification adapter.

Backend chain:
  1. Ollama  (OLLAMA_URL)          — free, local
  2. Anthropic Messages API        — if ANTHROPIC_API_KEY is set
  → RemoteClassificationError when neither produced a parsable answer.

The model is asked for the AnalysisResult JSON shape; whatever comes back is
validated leniently through RemoteAnalysis and default-filled against the
local result, so callers never see a partial object.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, Optional

import httpx
from pydantic import ValidationError

from callpulse.config import settings
from callpulse.models.schemas import AnalysisResult, RemoteAnalysis
from callpulse.services.classifier import SentimentClassifier, get_classifier, normalize_text
from callpulse.utils.logging import logger


class RemoteClassificationError(Exception):
    """Network, timeout, HTTP or parse failure of every configured backend."""


# ── Prompt ───────────────────────────────────────────────────────────────────

_SYSTEM_PROMPT = (
    "You are an expert sentiment analysis engine for customer support calls. "
    "Classify the customer's statement into exactly one emotion from: "
    "Excited, Grateful, Happy, Satisfied, Neutral, Concerned, Confused, Disappointed, "
    "Frustrated, Disgusted, Angry. "
    "Positive words with negative context count as negative. Questions asked with frustration "
    "are Frustrated, not Confused. Mild complaints are Disappointed, not Angry. "
    "Respond with JSON only, no prose."
)

_USER_TEMPLATE = """Statement: "{text}"

Respond with exactly this JSON object:
{{
  "emotion": "one emotion name from the list",
  "sentimentScore": number from 1 to 10,
  "intensity": "low" | "medium" | "high",
  "keyIndicators": ["words that triggered this emotion"],
  "suggestion": "specific agent action for this emotion",
  "priority": "high for negative emotions, medium for neutral, low for positive",
  "recommendedTone": "empathetic | professional | enthusiastic",
  "coachingTips": ["behavioural tip", "tone guidance", "next step"],
  "phraseExamples": ["response phrase", "alternative phrase", "follow-up phrase"],
  "warningFlags": ["escalation risk", "warning sign"]
}}"""

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_remote_payload(raw: str) -> Dict[str, Any]:
    """Extract the first JSON object from model output (tolerates code fences / prose)."""
    if not raw or not raw.strip():
        raise RemoteClassificationError("empty model response")
    m = _JSON_OBJECT_RE.search(raw)
    if not m:
        raise RemoteClassificationError("no JSON object in model response")
    try:
        data = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise RemoteClassificationError(f"malformed JSON: {e}") from e
    if not isinstance(data, dict):
        raise RemoteClassificationError("model response is not a JSON object")
    return data


def _envelope_text(resp: httpx.Response, extract: Callable[[Any], Any]) -> str:
    """Pull the model text out of a backend's response body."""
    try:
        text = extract(resp.json())
    except (ValueError, AttributeError, TypeError, KeyError, IndexError) as e:
        raise RemoteClassificationError(f"malformed response envelope: {e!r}") from e
    if not isinstance(text, str):
        raise RemoteClassificationError(f"model text is {type(text).__name__}, not str")
    return text


# ── Adapter ──────────────────────────────────────────────────────────────────

class RemoteClassifier:
    def __init__(
        self,
        local: Optional[SentimentClassifier] = None,
        ollama_url: Optional[str] = None,
        ollama_model: Optional[str] = None,
        anthropic_api_key: Optional[str] = None,
        anthropic_model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.local             = local or get_classifier()
        self.ollama_url        = (ollama_url if ollama_url is not None else settings.OLLAMA_URL).rstrip("/")
        self.ollama_model      = ollama_model or settings.OLLAMA_MODEL
        self.anthropic_api_key = (anthropic_api_key if anthropic_api_key is not None
                                  else settings.ANTHROPIC_API_KEY).strip()
        self.anthropic_model   = anthropic_model or settings.ANTHROPIC_MODEL
        self.timeout           = timeout if timeout is not None else settings.REMOTE_TIMEOUT_S
        self._transport        = transport

    async def classify_remote(self, text: object) -> AnalysisResult:
        text = normalize_text(text).strip()
        if not text:
            raise RemoteClassificationError("nothing to classify")

        errors = []

        # 1. Ollama (local)
        if self.ollama_url:
            try:
                return self._merge(text, await self._try_ollama(text))
            except (httpx.HTTPError, RemoteClassificationError, ValidationError) as e:
                logger.debug(f"Remote: Ollama unavailable — {e}")
                errors.append(f"ollama: {e}")

        # 2. Anthropic
        if self.anthropic_api_key:
            try:
                return self._merge(text, await self._try_anthropic(text))
            except (httpx.HTTPError, RemoteClassificationError, ValidationError) as e:
                logger.warning(f"Remote: Anthropic API failed — {e}")
                errors.append(f"anthropic: {e}")

        raise RemoteClassificationError("; ".join(errors) or "no remote backend configured")

    __call__ = classify_remote

    # ── Backends ─────────────────────────────────────────────────────────────

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _try_ollama(self, text: str) -> Dict[str, Any]:
        async with self._client() as client:
            resp = await client.post(
                f"{self.ollama_url}/api/chat",
                json={
                    "model":    self.ollama_model,
                    "messages": [
                        {"role": "system", "content": _SYSTEM_PROMPT},
                        {"role": "user",   "content": _USER_TEMPLATE.format(text=text)},
                    ],
                    "stream":   False,
                    "format":   "json",
                    "options":  {"temperature": 0.1, "num_predict": 400},
                },
            )
            resp.raise_for_status()
        content = _envelope_text(resp, lambda body: body.get("message", {}).get("content", ""))
        return parse_remote_payload(content)

    async def _try_anthropic(self, text: str) -> Dict[str, Any]:
        async with self._client() as client:
            resp = await client.post(
                "https://api.anthropic.com/v1/messages",
                headers={
                    "x-api-key":         self.anthropic_api_key,
                    "anthropic-version": "2023-06-01",
                    "content-type":      "application/json",
                },
                json={
                    "model":      self.anthropic_model,
                    "max_tokens": 600,
                    "system":     _SYSTEM_PROMPT,
                    "messages":   [{"role": "user", "content": _USER_TEMPLATE.format(text=text)}],
                },
            )
            resp.raise_for_status()
        content = _envelope_text(resp, lambda body: body["content"][0]["text"])
        return parse_remote_payload(content)

    def _merge(self, text: str, payload: Dict[str, Any]) -> AnalysisResult:
        partial = RemoteAnalysis.model_validate(payload)
        return partial.merge_into(self.local.classify(text))
