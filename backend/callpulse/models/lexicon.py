"""
Lexicon Scorer — VADER valence lexicon wrapper.

    score(text) → PolarityReading(compound, positive, negative, neutral)

VADER sums word-level valences with its own heuristics (negators flip and damp,
boosters such as "very"/"extremely" scale, ALL-CAPS emphasis and "!" add
weight, "but" shifts weight to the second clause) and normalises the sum into
compound ∈ [-1, 1]. We rely on it unchanged.

If the lexicon resource cannot be loaded the scorer degrades to the neutral
reading (compound 0), which turns the resolver's lexicon bonus into 0 and
leaves keyword matching untouched.
"""
from __future__ import annotations
from typing import Callable, Optional

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from callpulse.models.schemas import NEUTRAL_READING, PolarityReading
from callpulse.utils.logging import logger


def _clip(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


class LexiconScorer:
    def __init__(self, analyzer_factory: Callable[[], object] = SentimentIntensityAnalyzer):
        self._analyzer: Optional[object] = None
        try:
            self._analyzer = analyzer_factory()
        except Exception as e:
            logger.warning(f"Lexicon: unavailable, keyword-only matching — {e}")

    @property
    def available(self) -> bool:
        return self._analyzer is not None

    def score(self, text: str) -> PolarityReading:
        if not text or not text.strip() or self._analyzer is None:
            return NEUTRAL_READING
        try:
            raw = self._analyzer.polarity_scores(text)
        except Exception as e:
            logger.warning(f"Lexicon: scoring failed, using neutral reading — {e}")
            return NEUTRAL_READING

        return PolarityReading(
            compound = _clip(raw.get("compound", 0.0), -1.0, 1.0),
            positive = _clip(raw.get("pos", 0.0), 0.0, 1.0),
            negative = _clip(raw.get("neg", 0.0), 0.0, 1.0),
            neutral  = _clip(raw.get("neu", 1.0), 0.0, 1.0),
        )
