"""
Shared pytest fixtures for transcript reconciliation tests.
"""

import time
import pytest
from transcript_reconciler.models import (
    RecognitionEvent,
    ReconcilerConfig,
    ScannerConfig,
    SessionConfig
)
from transcript_reconciler.services import (
    DuplicateReconciler,
    SentenceBoundaryDetector,
    SentenceTerminatorClassifier
)


class FakeClock:
    """Manually advanced clock for suppression and idle tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockResultSink:
    """Mock downstream consumer recording delivered events in order."""

    def __init__(self):
        self.events = []

    async def accept(self, event):
        self.events.append(event)

    async def replace(self, event):
        self.events.append(event)

    @property
    def accepted_texts(self):
        return [e.text for e in self.events if hasattr(e, 'text')]


@pytest.fixture
def clock():
    """Fixture providing a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def classifier():
    """Fixture providing a classifier with the built-in tables."""
    return SentenceTerminatorClassifier()


@pytest.fixture
def detector(clock):
    """Fixture providing a detector with default configuration."""
    return SentenceBoundaryDetector(clock=clock)


@pytest.fixture
def reconciler():
    """Fixture providing a reconciler with default configuration."""
    return DuplicateReconciler(session_id='test-session-456')


@pytest.fixture
def mock_sink():
    """Fixture providing a recording result sink."""
    return MockResultSink()


@pytest.fixture
def session_config():
    """Fixture providing explicit session configuration."""
    return SessionConfig(
        scanner=ScannerConfig(),
        reconciler=ReconcilerConfig(),
        discrepancy_threshold=20.0
    )


@pytest.fixture
def partial_event():
    """Factory fixture for partial recognition events."""
    def _make(text: str) -> RecognitionEvent:
        return RecognitionEvent(event_type='partial', transcript=text, timestamp=time.time())
    return _make
