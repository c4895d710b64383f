import pytest
from pydantic import ValidationError

from callpulse.models.coaching import COACHING_LIBRARY
from callpulse.models.lexicon import LexiconScorer
from callpulse.models.schemas import AnalysisResult, Intensity, Priority
from callpulse.services.classifier import SentimentClassifier, classify, normalize_text


class TestScenarios:
    def test_angry(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("I am angry")
        assert r.emotion == "Angry"
        assert r.sentiment_score == 1.5
        assert r.priority == Priority.HIGH
        assert r.recommended_tone == "empathetic"
        assert r.suggestion == COACHING_LIBRARY["Angry"].suggestion

    def test_excited(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("This is awesome")
        assert r.emotion == "Excited"
        assert r.sentiment_score == 9.0
        assert r.priority == Priority.LOW
        assert r.recommended_tone == "enthusiastic"

    def test_grateful(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("thank you so much")
        assert r.emotion == "Grateful"
        assert "thank" in r.key_indicators

    def test_empty(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("")
        assert r.emotion == "Neutral"
        assert r.sentiment_score == 5
        assert r.intensity == Intensity.LOW
        assert r.key_indicators == []
        assert r.method == "empty"

    def test_negative_context_wins(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("great, it's broken again")
        assert r.emotion == "Frustrated"
        assert r.priority == Priority.HIGH

    def test_no_keywords_uses_lexicon(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("The package arrived on Tuesday")
        assert r.emotion == "Neutral"
        assert r.method == "lexicon-fallback"
        assert r.key_indicators == []

    def test_lexicon_only_negative_stays_medium(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("I have a problem with the bill")
        assert r.emotion == "Frustrated"
        assert r.method == "lexicon-fallback"
        assert r.intensity != Intensity.HIGH
        assert r.priority == Priority.MEDIUM

    def test_shouting_raises_priority(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("I am SO DISAPPOINTED, this ALWAYS happens!!!")
        assert r.emotion == "Disappointed"
        assert r.intensity == Intensity.HIGH
        assert r.priority == Priority.HIGH


class TestContract:
    TEXTS = [
        "", "ok", "I am angry", "why is this so complicated", "I'm worried about the bill",
        "thanks, that works", "ABSOLUTELY FURIOUS!!!", "meh", "x" * 5000,
    ]

    @pytest.mark.parametrize("text", TEXTS)
    def test_ranges(self, classifier: SentimentClassifier, text: str) -> None:
        r = classifier.classify(text)
        assert 1.0 <= r.sentiment_score <= 10.0
        assert -1.0 <= r.polarity.compound <= 1.0
        assert r.intensity in set(Intensity)
        assert r.priority in set(Priority)
        assert r.suggestion
        assert r.coaching_tips and r.phrase_examples and r.warning_flags

    @pytest.mark.parametrize("text", TEXTS)
    def test_idempotent(self, classifier: SentimentClassifier, text: str) -> None:
        assert classifier.classify(text) == classifier.classify(text)

    def test_result_is_frozen(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("I am angry")
        with pytest.raises(ValidationError):
            r.emotion = "Happy"  # type: ignore[misc]

    def test_wire_format(self, classifier: SentimentClassifier) -> None:
        wire = classifier.classify("thank you so much").to_wire()
        assert wire["emotion"] == "Grateful"
        assert wire["priority"] == "low"
        assert isinstance(wire["sentimentScore"], float)
        assert isinstance(wire["keyIndicators"], list)
        assert wire["source"] == "local"
        assert AnalysisResult.model_validate(wire).emotion == "Grateful"


class TestMalformedInput:
    @pytest.mark.parametrize("value", [None, 42, 3.5, ["I am angry"], {"text": "angry"}])
    def test_non_text_is_neutral(self, classifier: SentimentClassifier, value) -> None:
        r = classifier.classify(value)
        assert r.emotion == "Neutral"
        assert r.sentiment_score == 5

    def test_bytes_are_decoded(self, classifier: SentimentClassifier) -> None:
        assert classifier.classify(b"I am angry").emotion == "Angry"
        assert normalize_text(b"caf\xff") == "caf\ufffd"

    def test_control_characters(self, classifier: SentimentClassifier) -> None:
        r = classifier.classify("I am\x00 angry\x07")
        assert r.emotion == "Angry"


def test_fallback_marks_source(classifier: SentimentClassifier) -> None:
    r = classifier.fallback("this is broken")
    assert r.source == "local-fallback"
    assert r.emotion == "Frustrated"


def test_keyword_only_when_lexicon_unavailable() -> None:
    def broken():
        raise OSError("lexicon missing")

    c = SentimentClassifier(lexicon=LexiconScorer(analyzer_factory=broken))
    r = c.classify("I am angry")
    assert r.emotion == "Angry"
    assert r.polarity.compound == 0.0

    assert c.classify("The package arrived on Tuesday").emotion == "Neutral"


def test_module_level_classify() -> None:
    assert classify("I am angry").emotion == "Angry"
