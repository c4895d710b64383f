"""
Emotion rule table — the single canonical keyword/phrase lexicon.

Each rule: near-synonym keywords, a few multi-word phrases (weighted ×1.5 by
the resolver), a 1–10 base score, a priority tier and a per-keyword weight.
Negative rules carry higher weights and high/medium priority so they still win
when a positive word co-occurs ("great, it's broken again").

Table order is the tie-break order: on exactly equal weighted scores the rule
listed first wins.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from callpulse.models.schemas import Priority


@dataclass(frozen=True)
class EmotionRule:
    name: str
    keywords: Tuple[str, ...]
    phrases: Tuple[str, ...]
    base_score: float
    priority: Priority
    keyword_weight: float = 1.0


RULE_TABLE: Tuple[EmotionRule, ...] = (
    # ── Positive ─────────────────────────────────────────────────────────────
    EmotionRule(
        name="Excited",
        keywords=("excited", "amazing", "fantastic", "incredible", "awesome", "love it",
                  "perfect", "excellent", "brilliant", "outstanding", "spectacular",
                  "phenomenal", "superb", "magnificent", "thrilled"),
        phrases=("love this", "absolutely amazing", "this is awesome", "so excited",
                 "really amazing", "can't wait"),
        base_score=9.0,
        priority=Priority.LOW,
        keyword_weight=3.0,
    ),
    EmotionRule(
        name="Happy",
        keywords=("happy", "pleased", "delighted", "great", "wonderful", "good", "nice",
                  "glad", "joy", "cheerful"),
        phrases=("really happy", "so pleased", "this is great", "very good", "quite happy"),
        base_score=7.5,
        priority=Priority.LOW,
        keyword_weight=2.5,
    ),
    EmotionRule(
        name="Grateful",
        keywords=("thank", "thanks", "appreciate", "grateful", "thankful", "helpful", "blessing"),
        phrases=("thank you", "really appreciate", "so helpful", "much appreciated",
                 "very grateful", "thanks so much"),
        base_score=8.5,
        priority=Priority.LOW,
        keyword_weight=3.0,
    ),
    EmotionRule(
        name="Satisfied",
        keywords=("satisfied", "fine", "okay", "alright", "adequate", "sufficient",
                  "acceptable", "good enough", "works"),
        phrases=("that works", "good enough", "seems fine", "i am satisfied", "this is fine"),
        base_score=6.5,
        priority=Priority.LOW,
        keyword_weight=2.0,
    ),
    # ── Negative ─────────────────────────────────────────────────────────────
    EmotionRule(
        name="Angry",
        keywords=("angry", "furious", "hate", "ridiculous", "unacceptable", "fed up",
                  "livid", "outraged", "enraged", "infuriated", "pissed", "mad"),
        phrases=("fed up with", "absolutely ridiculous", "completely unacceptable",
                 "hate this", "so angry", "pissed off"),
        base_score=1.5,
        priority=Priority.HIGH,
        keyword_weight=3.5,
    ),
    EmotionRule(
        name="Disgusted",
        keywords=("disgusting", "disgusted", "gross", "nasty", "revolting", "repulsive",
                  "vile", "appalling", "nauseating"),
        phrases=("makes me sick", "so disgusting", "really gross", "sick to my stomach"),
        base_score=2.0,
        priority=Priority.HIGH,
        keyword_weight=3.0,
    ),
    EmotionRule(
        name="Frustrated",
        keywords=("frustrated", "frustrating", "annoying", "annoyed", "irritating", "irritated",
                  "doesn't work", "not working", "broken", "useless", "terrible", "awful"),
        phrases=("keep trying", "still doesn't", "same problem", "every time",
                 "so frustrated", "nothing works"),
        base_score=2.5,
        priority=Priority.HIGH,
        keyword_weight=3.0,
    ),
    EmotionRule(
        name="Disappointed",
        keywords=("disappointed", "disappointing", "let down", "underwhelming", "not good",
                  "expected better", "worse than expected"),
        phrases=("not what i", "thought it would", "let me down", "could be better",
                 "not impressed"),
        base_score=3.0,
        priority=Priority.MEDIUM,
        keyword_weight=2.5,
    ),
    # ── Uncertain ────────────────────────────────────────────────────────────
    EmotionRule(
        name="Concerned",
        keywords=("worried", "concerned", "anxious", "nervous", "uncertain", "doubtful",
                  "hesitant", "unsure"),
        phrases=("worried about", "not sure if", "concerned that", "what if", "hope this works"),
        base_score=4.0,
        priority=Priority.MEDIUM,
        keyword_weight=2.0,
    ),
    EmotionRule(
        name="Confused",
        keywords=("confused", "confusing", "unclear", "don't understand", "complicated",
                  "perplexed", "puzzled", "baffled"),
        phrases=("not clear", "how do i", "what does this mean", "makes no sense", "so confused"),
        base_score=4.5,
        priority=Priority.LOW,
        keyword_weight=2.0,
    ),
)

RULES_BY_NAME = {rule.name: rule for rule in RULE_TABLE}

# Emotions whose priority is raised to high when intensity is high.
ESCALATING_EMOTIONS = frozenset({"Angry", "Frustrated", "Disappointed", "Disgusted"})
