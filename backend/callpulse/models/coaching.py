"""
Coaching Synthesizer — emotion → agent guidance (pure lookup).

The library is built once at import and is read-only; unknown emotions get
the Neutral bundle.
"""
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from callpulse.models.schemas import Priority


@dataclass(frozen=True)
class CoachingBundle:
    suggestion: str
    coaching_tips: Tuple[str, ...]
    phrase_examples: Tuple[str, ...]
    warning_flags: Tuple[str, ...]

    def to_wire(self) -> dict:
        return {
            "suggestion":     self.suggestion,
            "coachingTips":   list(self.coaching_tips),
            "phraseExamples": list(self.phrase_examples),
            "warningFlags":   list(self.warning_flags),
        }


DEFAULT_EMOTION = "Neutral"

COACHING_LIBRARY: Mapping[str, CoachingBundle] = MappingProxyType({
    "Angry": CoachingBundle(
        suggestion="Customer is angry. Stay calm, listen actively, apologize sincerely, and escalate if necessary.",
        coaching_tips=(
            "Immediate de-escalation: acknowledge the anger right away",
            "Voice: lower tone, slow pace, calm energy",
            "Avoid explanations, excuses or defensive responses",
            "Listen, validate feelings, take ownership",
        ),
        phrase_examples=(
            "I completely understand why you're angry - this is unacceptable",
            "You have every right to be upset, and I'm going to fix this personally",
            "I hear your frustration, and I'm taking full responsibility",
            "Let me make this right immediately - what would you like me to do?",
        ),
        warning_flags=(
            "Critical: high escalation risk - handle with extreme care",
            "Do not say \"I understand\" without action",
            "Avoid \"company policy\" or \"that's not possible\"",
        ),
    ),
    "Disgusted": CoachingBundle(
        suggestion="Customer is repulsed by the experience. Acknowledge the severity, apologize and remediate immediately.",
        coaching_tips=(
            "Acknowledge the severity of their reaction",
            "Focus on immediate remediation and prevention",
            "Show you take their concern very seriously",
            "Consider escalating to a supervisor if needed",
        ),
        phrase_examples=(
            "That's completely unacceptable, and I apologize",
            "I'm appalled that this happened - let me fix this immediately",
            "You shouldn't have to deal with this - I'm making it right",
        ),
        warning_flags=(
            "Severe negative reaction - handle delicately",
            "High risk of public complaint",
            "May need root cause investigation",
        ),
    ),
    "Frustrated": CoachingBundle(
        suggestion=("Customer is frustrated. Acknowledge their feelings, apologize for the inconvenience, "
                    "and focus on immediate resolution."),
        coaching_tips=(
            "Focus on solutions, not problems",
            "Provide specific, actionable next steps",
            "Show partnership: \"Let's solve this together\"",
            "Set clear expectations and timelines",
        ),
        phrase_examples=(
            "I can see this is really frustrating - here's exactly what we'll do",
            "Let's tackle this step by step and get it resolved",
            "I have three options to fix this - which works best for you?",
            "I'm committed to solving this today - here's our plan",
        ),
        warning_flags=(
            "Watch for escalation signals",
            "Customer patience is limited - act quickly",
            "May need multiple solution attempts",
        ),
    ),
    "Disappointed": CoachingBundle(
        suggestion=("Customer had higher expectations. Acknowledge the disappointment and work to exceed "
                    "expectations moving forward."),
        coaching_tips=(
            "Acknowledge their unmet expectations",
            "Consider offering something extra to rebuild trust",
            "Learn what they expected versus what they got",
            "Focus on exceeding expectations next time",
        ),
        phrase_examples=(
            "I can hear the disappointment, and I want to make this better",
            "This isn't the experience you expected, and I'm sorry about that",
            "Let me understand what you were hoping for and see how we can deliver",
        ),
        warning_flags=(
            "Trust may be damaged - focus on rebuilding",
            "May need to understand their original expectations",
        ),
    ),
    "Confused": CoachingBundle(
        suggestion="Customer needs clarification. Slow down, explain step-by-step, and ensure understanding before proceeding.",
        coaching_tips=(
            "Break complex information into simple, clear steps",
            "Use everyday language, avoid jargon",
            "Check understanding after each step",
            "Use analogies or examples they can relate to",
        ),
        phrase_examples=(
            "Let me break this down into simple steps you can follow",
            "I'll explain this in plain English - no technical terms",
            "Does that make sense, or would you like me to explain it differently?",
        ),
        warning_flags=(
            "Don't overload with information",
            "Ask \"does that make sense?\" frequently",
            "May need visual aids or demonstrations",
        ),
    ),
    "Concerned": CoachingBundle(
        suggestion="Customer has concerns. Address them directly with reassurance and detailed information.",
        coaching_tips=(
            "Address their worries with specific reassurances",
            "Provide detailed information to ease concerns",
            "Offer ongoing support and check-ins",
            "Give them direct contact for future concerns",
        ),
        phrase_examples=(
            "I understand your concerns, and here's how we address them",
            "Let me put your mind at ease about this",
            "I'm here to support you every step of the way",
        ),
        warning_flags=(
            "May need detailed explanations",
            "Consider follow-up contact",
        ),
    ),
    "Excited": CoachingBundle(
        suggestion="Customer is very enthusiastic! Capitalize on this energy and explore additional ways to help.",
        coaching_tips=(
            "Match their energy and enthusiasm",
            "Build on their excitement with additional value",
            "Good time for upselling or cross-selling",
            "Create memorable, shareable moments",
        ),
        phrase_examples=(
            "I love your enthusiasm! This is going to be great for you",
            "You're going to get so much value from this",
            "Since you love this, you might also be interested in...",
        ),
        warning_flags=(
            "Golden opportunity - don't waste it",
            "Don't oversell and ruin the moment",
        ),
    ),
    "Happy": CoachingBundle(
        suggestion="Customer is satisfied! Maintain this positive experience and consider upselling opportunities.",
        coaching_tips=(
            "Reinforce their positive feelings",
            "Ask about other needs while they're positive",
            "Request feedback or reviews",
            "Strengthen the relationship",
        ),
        phrase_examples=(
            "I'm so glad you're happy with this",
            "Is there anything else I can help you with while you're here?",
            "Would you mind sharing your experience with others?",
        ),
        warning_flags=(
            "Great time to ask for reviews",
            "Opportunity for additional sales",
        ),
    ),
    "Grateful": CoachingBundle(
        suggestion="Customer appreciates the service. This is a great opportunity to strengthen the relationship.",
        coaching_tips=(
            "Accept thanks graciously and humbly",
            "Reinforce ongoing support availability",
            "Make them feel valued as a customer",
            "Build long-term loyalty",
        ),
        phrase_examples=(
            "You're so welcome - helping you was my pleasure",
            "Thank you for giving me the opportunity to help",
            "I'm always here whenever you need support",
        ),
        warning_flags=(
            "Relationship-building moment",
            "Encourage them to come back",
        ),
    ),
    "Satisfied": CoachingBundle(
        suggestion="Good interaction. Continue providing excellent service and ask if there's anything else needed.",
        coaching_tips=(
            "Confirm their satisfaction is genuine",
            "Look for opportunities to exceed expectations",
            "Consider small gestures to delight them",
            "Make sure they know about future support",
        ),
        phrase_examples=(
            "I'm glad this works for you - is there anything else I can do?",
            "I want to make sure you have everything you need",
            "Don't hesitate to reach out if you need anything",
        ),
        warning_flags=(
            "Room to move from satisfied to delighted",
            "Opportunity for additional value",
        ),
    ),
    DEFAULT_EMOTION: CoachingBundle(
        suggestion="Customer seems neutral. Engage proactively to understand their needs and provide helpful assistance.",
        coaching_tips=(
            "Inject positive energy to elevate the interaction",
            "Ask engaging questions to understand needs",
            "Provide helpful information proactively",
        ),
        phrase_examples=(
            "How can I make your day a little better?",
            "I'd be happy to help you with that",
            "Let me see what options we have for you",
        ),
        warning_flags=(
            "Opportunity to create positive momentum",
            "Can guide conversation toward specific goals",
        ),
    ),
})

# Shown while a live session is still calibrating.
WARMUP_EMOTION = "Listening..."
WARMUP_BUNDLE = CoachingBundle(
    suggestion="System is listening and calibrating...",
    coaching_tips=(
        "System is listening and calibrating...",
        "Detailed analysis will begin in 15-20 seconds",
        "Continue speaking naturally",
    ),
    phrase_examples=(
        "Please continue the conversation...",
        "System is processing audio patterns...",
        "Detailed insights coming soon...",
    ),
    warning_flags=(
        "Warmup phase - detailed analysis pending",
        "Audio calibration in progress",
    ),
)


def recommended_tone(emotion: str, priority: Priority) -> str:
    if priority == Priority.HIGH:
        return "empathetic"
    if emotion == "Excited":
        return "enthusiastic"
    return "professional"


class CoachingSynthesizer:
    def __init__(self, library: Mapping[str, CoachingBundle] = COACHING_LIBRARY):
        if DEFAULT_EMOTION not in library:
            raise ValueError(f"coaching library needs a '{DEFAULT_EMOTION}' entry")
        self._library = library

    def synthesize(self, emotion: object) -> CoachingBundle:
        if isinstance(emotion, str) and emotion in self._library:
            return self._library[emotion]
        return self._library[DEFAULT_EMOTION]

    def emotions(self) -> Tuple[str, ...]:
        return tuple(self._library)
