import pytest

from callpulse.services.response_generator import generate_reply


def first(options):
    return options[0]


@pytest.mark.parametrize("message", ["thank you!", "Thanks a lot", "I really appreciate it"])
def test_thanks_get_appreciation(message: str) -> None:
    assert generate_reply("Angry", message, chooser=first) == (
        "Thanks! I love helping you understand your business better."
    )


@pytest.mark.parametrize("message", ["hello", "Hi there", "  hey, quick question", "Good morning"])
def test_greetings(message: str) -> None:
    assert generate_reply("Neutral", message, chooser=first).startswith("Hey there!")


@pytest.mark.parametrize("message", ["this is his fault", "which plan is this", "they said no"])
def test_greeting_words_inside_text_are_ignored(message: str) -> None:
    assert generate_reply("Frustrated", message, chooser=first) == "That sounds frustrating. Let's work through it."


def test_emotion_template() -> None:
    assert generate_reply("Happy", chooser=first) == "Glad to hear it!"
    assert generate_reply("Confused", "the invoice total", chooser=lambda o: o[-1]) == (
        "Good question. Let's break it down."
    )


@pytest.mark.parametrize("emotion", ["Sarcastic", "", None])
def test_unknown_emotion_is_neutral(emotion) -> None:
    assert generate_reply(emotion, chooser=first) == "Got it."


def test_default_chooser_picks_a_template() -> None:
    assert generate_reply("Grateful") in {"Happy to help!", "Anytime!"}
