"""
Emotion Resolver — word-focused scoring with a lexicon fallback.

For every rule (all rules, always):
    keywords, phrases  = case-insensitive substring hits
    weighted           = Σ weight · |keywords| + Σ 1.5·weight · |phrases|
    weighted          += 0.3·|compound|                (only if something matched)
    weighted          *= {high: 1.3, medium: 1.1, low: 1.0}[rule.priority]

Winner = strictly greatest weighted score; equal scores keep the rule that
appears first in the table. No match at all → compound thresholds:

    c ≥ 0.3        Happy        5.5 + 4c
    0.1 ≤ c < 0.3  Satisfied    5 + 2c
    c ≤ -0.3       Frustrated   3 - 2c
    -0.3 < c ≤ -0.1 Concerned   4.5 + c
    otherwise      Neutral      5

Fallback priority is medium. High intensity upgrades Angry/Frustrated/
Disappointed/Disgusted to high priority.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from callpulse.models.intensity import IntensityReading
from callpulse.models.rules import ESCALATING_EMOTIONS, RULE_TABLE, EmotionRule
from callpulse.models.schemas import Intensity, PolarityReading, Priority
from callpulse.utils.logging import logger

PHRASE_FACTOR = 1.5
LEXICON_BONUS = 0.3
PRIORITY_MULTIPLIER = {
    Priority.HIGH:   1.3,
    Priority.MEDIUM: 1.1,
    Priority.LOW:    1.0,
}

NEUTRAL = "Neutral"
NEUTRAL_SCORE = 5.0


@dataclass
class MatchResult:
    rule: EmotionRule
    matched_keywords: List[str] = field(default_factory=list)
    matched_phrases: List[str] = field(default_factory=list)
    weighted_score: float = 0.0

    @property
    def matched(self) -> bool:
        return bool(self.matched_keywords or self.matched_phrases)


@dataclass(frozen=True)
class Resolution:
    emotion: str
    sentiment_score: float
    priority: Priority
    key_indicators: List[str]
    confidence: float
    method: str


def _clamp_score(score: float) -> float:
    return max(1.0, min(10.0, score))


def match_rule(rule: EmotionRule, lowered: str, compound: float) -> MatchResult:
    result = MatchResult(rule=rule)
    for kw in rule.keywords:
        if kw.lower() in lowered:
            result.matched_keywords.append(kw)
    for phrase in rule.phrases:
        if phrase.lower() in lowered:
            result.matched_phrases.append(phrase)
    if not result.matched:
        return result

    score = rule.keyword_weight * len(result.matched_keywords)
    score += rule.keyword_weight * PHRASE_FACTOR * len(result.matched_phrases)
    score += abs(compound) * LEXICON_BONUS
    result.weighted_score = score * PRIORITY_MULTIPLIER[rule.priority]
    return result


def best_match(text: str, compound: float,
               rules: Sequence[EmotionRule] = RULE_TABLE) -> Optional[MatchResult]:
    lowered = text.lower()
    best: Optional[MatchResult] = None
    for rule in rules:
        m = match_rule(rule, lowered, compound)
        if not m.matched:
            continue
        logger.debug(
            f"Word match - {rule.name}: {len(m.matched_keywords)} keywords, "
            f"{len(m.matched_phrases)} phrases, score {m.weighted_score:.2f}"
        )
        if best is None or m.weighted_score > best.weighted_score:
            best = m
    return best


def _fallback(compound: float) -> tuple[str, float]:
    if compound >= 0.3:
        return "Happy", 5.5 + compound * 4
    if compound >= 0.1:
        return "Satisfied", 5.0 + compound * 2
    if compound <= -0.3:
        return "Frustrated", 3.0 - compound * 2
    if compound <= -0.1:
        return "Concerned", 4.5 + compound
    return NEUTRAL, NEUTRAL_SCORE


def resolve(text: str, polarity: PolarityReading, intensity: IntensityReading,
            rules: Sequence[EmotionRule] = RULE_TABLE) -> Resolution:
    if not text or not text.strip():
        return Resolution(NEUTRAL, NEUTRAL_SCORE, Priority.MEDIUM, [], 50.0, "empty")

    match = best_match(text, polarity.compound, rules)
    if match is not None:
        emotion = match.rule.name
        score = match.rule.base_score
        priority = match.rule.priority
        indicators = list(match.matched_keywords)
        confidence = min(95.0, 50.0 + 12 * len(match.matched_keywords) + 18 * len(match.matched_phrases))
        method = "word-analysis"
    else:
        emotion, score = _fallback(polarity.compound)
        priority = Priority.MEDIUM
        indicators = []
        confidence = 50.0
        method = "lexicon-fallback"
        logger.debug(f"Fallback: {emotion} (lexicon only: {polarity.compound:.3f})")

    if intensity.level == Intensity.HIGH and emotion in ESCALATING_EMOTIONS:
        priority = Priority.HIGH

    return Resolution(
        emotion=emotion,
        sentiment_score=round(_clamp_score(score), 2),
        priority=priority,
        key_indicators=indicators,
        confidence=confidence,
        method=method,
    )
