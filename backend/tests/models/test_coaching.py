from types import MappingProxyType

import pytest

from callpulse.models.coaching import (
    COACHING_LIBRARY, CoachingBundle, CoachingSynthesizer, recommended_tone,
)
from callpulse.models.rules import RULE_TABLE
from callpulse.models.schemas import Priority


@pytest.fixture(scope="module")
def synth() -> CoachingSynthesizer:
    return CoachingSynthesizer()


def test_every_rule_emotion_has_a_full_bundle(synth: CoachingSynthesizer) -> None:
    for rule in RULE_TABLE:
        bundle = synth.synthesize(rule.name)
        assert bundle is COACHING_LIBRARY[rule.name]
        assert bundle.suggestion
        assert 3 <= len(bundle.coaching_tips) <= 4
        assert 3 <= len(bundle.phrase_examples) <= 4
        assert 2 <= len(bundle.warning_flags) <= 3


@pytest.mark.parametrize("emotion", ["Sarcastic", "", "angry", None, 42])
def test_unknown_emotion_gets_neutral(synth: CoachingSynthesizer, emotion) -> None:
    assert synth.synthesize(emotion) == COACHING_LIBRARY["Neutral"]


def test_library_is_read_only() -> None:
    with pytest.raises(TypeError):
        COACHING_LIBRARY["Neutral"] = COACHING_LIBRARY["Happy"]  # type: ignore[index]

    bundle = COACHING_LIBRARY["Angry"]
    with pytest.raises(AttributeError):
        bundle.suggestion = "something else"  # type: ignore[misc]


def test_wire_shape_is_camel_case() -> None:
    wire = COACHING_LIBRARY["Confused"].to_wire()
    assert set(wire) == {"suggestion", "coachingTips", "phraseExamples", "warningFlags"}
    assert isinstance(wire["coachingTips"], list)


def test_custom_library_requires_neutral() -> None:
    only_happy = MappingProxyType({"Happy": COACHING_LIBRARY["Happy"]})
    with pytest.raises(ValueError):
        CoachingSynthesizer(only_happy)


def test_custom_library() -> None:
    calm = CoachingBundle("Stay calm.", ("breathe",), ("take your time",), ("none",))
    synth = CoachingSynthesizer({"Neutral": calm})
    assert synth.synthesize("Angry") is calm
    assert synth.emotions() == ("Neutral",)


@pytest.mark.parametrize("emotion, priority, tone", [
    ("Angry",     Priority.HIGH,   "empathetic"),
    ("Concerned", Priority.HIGH,   "empathetic"),
    ("Excited",   Priority.LOW,    "enthusiastic"),
    ("Happy",     Priority.LOW,    "professional"),
    ("Neutral",   Priority.MEDIUM, "professional"),
])
def test_recommended_tone(emotion: str, priority: Priority, tone: str) -> None:
    assert recommended_tone(emotion, priority) == tone
