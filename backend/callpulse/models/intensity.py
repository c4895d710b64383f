"""
Intensity Estimator.

score = |compound|
      + 0.2 per intensifier word    (really, very, extremely, ...)
      + 0.2 per escalation marker   (always, never, every time, ...)
      + 0.2 per emphatic punctuation run ("!!!", "???", "?!?")
      + 0.1 per ALL-CAPS run of ≥2 letters
level: low < 0.4 ≤ medium ≤ 0.7 < high
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Tuple

from callpulse.models.schemas import Intensity, PolarityReading

INTENSIFIERS: Tuple[str, ...] = (
    "really", "very", "extremely", "absolutely", "completely", "so", "totally", "super",
)
ESCALATION_MARKERS: Tuple[str, ...] = (
    "always", "never", "every time", "constantly", "still", "again",
)

MARKER_STEP = 0.2
CAPS_STEP = 0.1
MEDIUM_THRESHOLD = 0.4
HIGH_THRESHOLD = 0.7


def _word_pattern(words: Tuple[str, ...]) -> re.Pattern:
    alternation = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


_INTENSIFIER_RE = _word_pattern(INTENSIFIERS)
_ESCALATION_RE = _word_pattern(ESCALATION_MARKERS)
_PUNCT_RE = re.compile(r"[!?]{3,}")
_CAPS_RE = re.compile(r"[A-Z]{2,}")


@dataclass(frozen=True)
class IntensityReading:
    level: Intensity
    score: float


def level_for(score: float) -> Intensity:
    if score > HIGH_THRESHOLD:
        return Intensity.HIGH
    if score >= MEDIUM_THRESHOLD:
        return Intensity.MEDIUM
    return Intensity.LOW


def estimate(text: str, polarity: PolarityReading) -> IntensityReading:
    score = abs(polarity.compound)
    if text:
        score += MARKER_STEP * len(_INTENSIFIER_RE.findall(text))
        score += MARKER_STEP * len(_ESCALATION_RE.findall(text))
        score += MARKER_STEP * len(_PUNCT_RE.findall(text))
        score += CAPS_STEP * len(_CAPS_RE.findall(text))
    return IntensityReading(level=level_for(score), score=round(score, 4))
