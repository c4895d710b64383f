"""Shared pytest fixtures."""
import pytest

from callpulse.services.classifier import SentimentClassifier
from callpulse.utils.metrics import MetricsTracker


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def classifier() -> SentimentClassifier:
    return SentimentClassifier()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metrics(tmp_path) -> MetricsTracker:
    return MetricsTracker(str(tmp_path / "logs" / "metrics.jsonl"))
