"""
Shared data contracts.

AnalysisResult is the only externally visible shape; it serialises with the
camelCase field names the dashboard consumes (sentimentScore, keyIndicators,
coachingTips, ...). RemoteAnalysis is the lenient, all-optional view of whatever
JSON the LLM returned; `merge_into()` fills every gap and coerces every bad
value so the caller always gets a valid AnalysisResult.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Intensity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _Contract(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class PolarityReading(_Contract):
    """Lexicon output: compound in [-1, 1], proportions summing to ≈ 1."""
    compound: float = Field(0.0, ge=-1.0, le=1.0)
    positive: float = Field(0.0, ge=0.0, le=1.0)
    negative: float = Field(0.0, ge=0.0, le=1.0)
    neutral:  float = Field(1.0, ge=0.0, le=1.0)


NEUTRAL_READING = PolarityReading()


class AnalysisResult(_Contract):
    emotion:          str
    sentiment_score:  float = Field(..., ge=1.0, le=10.0)
    intensity:        Intensity = Intensity.LOW
    priority:         Priority = Priority.MEDIUM
    key_indicators:   List[str] = Field(default_factory=list)
    suggestion:       str = ""
    coaching_tips:    List[str] = Field(default_factory=list)
    phrase_examples:  List[str] = Field(default_factory=list)
    warning_flags:    List[str] = Field(default_factory=list)
    recommended_tone: str = "professional"
    polarity:         PolarityReading = NEUTRAL_READING
    confidence:       float = 50.0
    method:           str = "word-analysis"   # word-analysis | lexicon-fallback | empty | remote-llm
    source:           str = "local"           # local | remote | cache | local-fallback

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ── Remote (LLM) response ────────────────────────────────────────────────────

REMOTE_DEFAULT_SUGGESTION = "Continue monitoring conversation."
REMOTE_DEFAULT_TIPS = [
    "Listen actively and acknowledge the customer's concern",
    "Use empathetic language to build rapport",
    "Focus on solutions rather than problems",
]
REMOTE_DEFAULT_PHRASES = [
    "I understand your concern and I'm here to help",
    "Let me look into this for you right away",
    "I can see why this would be frustrating",
]
REMOTE_DEFAULT_FLAGS = [
    "Monitor for escalation signals",
    "Watch for tone changes",
]


def _str_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple)):
        return None
    items = [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
    return items or None


class RemoteAnalysis(BaseModel):
    """Partial AnalysisResult as returned by the LLM. Every field optional."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")

    emotion:          Optional[str] = None
    sentiment_score:  Optional[float] = None
    intensity:        Optional[Intensity] = None
    priority:         Optional[Priority] = None
    key_indicators:   Optional[List[str]] = None
    suggestion:       Optional[str] = None
    recommended_tone: Optional[str] = None
    coaching_tips:    Optional[List[str]] = None
    phrase_examples:  Optional[List[str]] = None
    warning_flags:    Optional[List[str]] = None

    @field_validator("emotion", "suggestion", "recommended_tone", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("sentiment_score", mode="before")
    @classmethod
    def _score(cls, v: Any) -> Optional[float]:
        try:
            score = float(v)
        except (TypeError, ValueError):
            return None
        if score != score:   # NaN
            return None
        return max(1.0, min(10.0, score))

    @field_validator("intensity", "priority", mode="before")
    @classmethod
    def _level(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip().lower() in ("low", "medium", "high"):
            return v.strip().lower()
        return None

    @field_validator("key_indicators", "coaching_tips", "phrase_examples", "warning_flags", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Optional[List[str]]:
        return _str_list(v)

    def merge_into(self, local: AnalysisResult) -> AnalysisResult:
        """Fill gaps with the stock remote defaults.

        The remote emotion wins unless it is missing or "Unknown", in which case
        the local emotion is used. Polarity and confidence always come from `local`.
        """
        emotion = self.emotion if self.emotion and self.emotion.lower() != "unknown" else local.emotion
        return AnalysisResult(
            emotion          = emotion,
            sentiment_score  = self.sentiment_score if self.sentiment_score is not None else 5.0,
            intensity        = self.intensity or Intensity.MEDIUM,
            priority         = self.priority or Priority.MEDIUM,
            key_indicators   = self.key_indicators or [],
            suggestion       = self.suggestion or REMOTE_DEFAULT_SUGGESTION,
            recommended_tone = self.recommended_tone or "professional",
            coaching_tips    = self.coaching_tips or list(REMOTE_DEFAULT_TIPS),
            phrase_examples  = self.phrase_examples or list(REMOTE_DEFAULT_PHRASES),
            warning_flags    = self.warning_flags or list(REMOTE_DEFAULT_FLAGS),
            polarity         = local.polarity,
            confidence       = local.confidence,
            method           = "remote-llm",
            source           = "remote",
        )


# ── Live session ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TranscriptEntry:
    speaker:   str
    text:      str
    timestamp: str
    emotion:   str
    score:     float
