import pytest

from callpulse.models.intensity import estimate, level_for
from callpulse.models.schemas import NEUTRAL_READING, Intensity, PolarityReading


def _reading(compound: float) -> PolarityReading:
    neg = max(0.0, -compound)
    pos = max(0.0, compound)
    return PolarityReading(compound=compound, positive=pos, negative=neg, neutral=1.0 - pos - neg)


def test_empty_text_is_low() -> None:
    r = estimate("", NEUTRAL_READING)
    assert r.level == Intensity.LOW
    assert r.score == 0.0


def test_compound_is_the_base() -> None:
    assert estimate("plain words", _reading(0.5)).level == Intensity.MEDIUM
    assert estimate("plain words", _reading(-0.8)).level == Intensity.HIGH
    assert estimate("plain words", _reading(0.1)).level == Intensity.LOW


def test_markers_accumulate() -> None:
    r = estimate("I am REALLY VERY angry!!!", _reading(-0.6))
    # 0.6 + 2 intensifiers (0.4) + "!!!" (0.2) + 2 caps runs (0.2)
    assert r.score == pytest.approx(1.4)
    assert r.level == Intensity.HIGH


def test_escalation_markers_reach_medium() -> None:
    r = estimate("this always happens again", NEUTRAL_READING)
    assert r.score == pytest.approx(0.4)
    assert r.level == Intensity.MEDIUM


def test_multiword_escalation_marker() -> None:
    assert estimate("every time I call", NEUTRAL_READING).score == pytest.approx(0.2)


def test_intensifiers_match_whole_words_only() -> None:
    assert estimate("I also think it is sort of fine", NEUTRAL_READING).score == 0.0


@pytest.mark.parametrize("score, level", [
    (0.0, Intensity.LOW),
    (0.39, Intensity.LOW),
    (0.4, Intensity.MEDIUM),
    (0.7, Intensity.MEDIUM),
    (0.71, Intensity.HIGH),
])
def test_thresholds(score: float, level: Intensity) -> None:
    assert level_for(score) == level
