"""
Conversational filler for chat replies.

Picks one of several pre-written greeting / appreciation / emotion-aware
lines so replies don't repeat. Purely cosmetic: coaching tips never go
through here. The random choice is injected (`chooser`) so callers and tests
can make it deterministic.
"""
from __future__ import annotations
import random
import re
from typing import Callable, Optional, Sequence

Chooser = Callable[[Sequence[str]], str]

_GREETING_RE = re.compile(r"^\s*(hello|hi|hey|what's up|how are you|good morning|good afternoon)\b", re.IGNORECASE)
_THANKS_WORDS = ("thank", "thanks", "appreciate", "great job", "awesome work")

_GREETINGS = [
    "Hey there! I'm here to help you understand your customers better.",
    "Hello! Ready to dive into some customer insights together?",
    "Hi! What would you like to explore in your call data today?",
    "Hello there! Let's make sense of your customer experience data.",
]

_APPRECIATION = [
    "Thanks! I love helping you understand your business better.",
    "You're too kind! Turning conversations into insights is what I do.",
    "Thank you! What else can we explore?",
    "That means a lot! Let's keep digging.",
]

# Emotion-aware acknowledgements, keyed by resolver emotion name.
_TEMPLATES: dict[str, list[str]] = {
    "Angry":        ["I can tell this is upsetting. Let's get it sorted.",
                     "That sounds really aggravating. Let's fix it."],
    "Disgusted":    ["That's not acceptable, and I'm sorry it happened.",
                     "I understand why that was so off-putting."],
    "Frustrated":   ["That sounds frustrating. Let's work through it.",
                     "I hear you. Let's find a way forward."],
    "Disappointed": ["I'm sorry it didn't meet expectations.",
                     "That's a letdown. Let's see what we can improve."],
    "Concerned":    ["That's a fair concern. Let's look at it together.",
                     "Let me help put your mind at ease."],
    "Confused":     ["Let me make that clearer.",
                     "Good question. Let's break it down."],
    "Excited":      ["Love the energy!",
                     "That's fantastic news!"],
    "Happy":        ["Glad to hear it!",
                     "That's great to hear."],
    "Grateful":     ["Happy to help!",
                     "Anytime!"],
    "Satisfied":    ["Good to hear that works.",
                     "Great, glad that's settled."],
    "Neutral":      ["Got it.",
                     "Understood. Tell me more."],
}


def generate_reply(
    emotion: str,
    message: Optional[str] = None,
    chooser: Chooser = random.choice,
) -> str:
    """Return an opening line for a chat reply to `message`."""
    lowered = (message or "").lower()
    if any(w in lowered for w in _THANKS_WORDS):
        return chooser(_APPRECIATION)
    if _GREETING_RE.match(lowered):
        return chooser(_GREETINGS)
    label = emotion if emotion in _TEMPLATES else "Neutral"
    return chooser(_TEMPLATES[label])
