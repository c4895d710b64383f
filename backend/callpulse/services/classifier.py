"""
Local classification service.

Pipeline:
  text → LexiconScorer.score        → PolarityReading
       → intensity.estimate         → IntensityReading
       → resolver.resolve           → Resolution (emotion, score, priority, indicators)
       → CoachingSynthesizer        → suggestion / tips / phrases / flags
       → AnalysisResult

`classify()` is total: malformed input is normalised to "" and yields the
Neutral / 5 result; nothing in here raises to the caller.
"""
from __future__ import annotations
from typing import Optional, Sequence

from callpulse.models import intensity as intensity_estimator
from callpulse.models import resolver
from callpulse.models.coaching import CoachingSynthesizer, recommended_tone
from callpulse.models.lexicon import LexiconScorer
from callpulse.models.rules import RULE_TABLE, EmotionRule
from callpulse.models.schemas import AnalysisResult


def normalize_text(text: object) -> str:
    if text is None:
        return ""
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    if not isinstance(text, str):
        return ""
    return text


class SentimentClassifier:
    def __init__(
        self,
        lexicon: Optional[LexiconScorer] = None,
        coaching: Optional[CoachingSynthesizer] = None,
        rules: Sequence[EmotionRule] = RULE_TABLE,
    ):
        self.lexicon  = lexicon or LexiconScorer()
        self.coaching = coaching or CoachingSynthesizer()
        self.rules    = tuple(rules)

    def classify(self, text: object) -> AnalysisResult:
        text = normalize_text(text)
        polarity   = self.lexicon.score(text)
        intensity  = intensity_estimator.estimate(text, polarity)
        resolution = resolver.resolve(text, polarity, intensity, self.rules)
        bundle     = self.coaching.synthesize(resolution.emotion)

        return AnalysisResult(
            emotion          = resolution.emotion,
            sentiment_score  = resolution.sentiment_score,
            intensity        = intensity.level,
            priority         = resolution.priority,
            key_indicators   = resolution.key_indicators,
            suggestion       = bundle.suggestion,
            coaching_tips    = list(bundle.coaching_tips),
            phrase_examples  = list(bundle.phrase_examples),
            warning_flags    = list(bundle.warning_flags),
            recommended_tone = recommended_tone(resolution.emotion, resolution.priority),
            polarity         = polarity,
            confidence       = resolution.confidence,
            method           = resolution.method,
            source           = "local",
        )

    def fallback(self, text: object) -> AnalysisResult:
        """Local result used when the remote classifier failed."""
        return self.classify(text).model_copy(update={"source": "local-fallback"})


_default: Optional[SentimentClassifier] = None


def get_classifier() -> SentimentClassifier:
    global _default
    _default = _default or SentimentClassifier()
    return _default


def classify(text: object) -> AnalysisResult:
    return get_classifier().classify(text)
