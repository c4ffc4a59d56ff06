"""Shared fixtures: fake recognizer, fake clock, clean store."""

from __future__ import annotations

import pytest

from commclimb import store
from commclimb.recognition.base import Recognizer, RecognizerError
from commclimb.transcript.models import Segment


class FakeRecognizer(Recognizer):
    """Records start/stop calls; optionally refuses starts."""

    def __init__(self, supported: bool = True) -> None:
        super().__init__()
        self.supported = supported
        self.start_calls = 0
        self.stop_calls = 0
        self.fail_start = False

    def start(self) -> None:
        self.start_calls += 1
        if self.fail_start:
            raise RecognizerError("already running")

    def stop(self) -> None:
        self.stop_calls += 1

    @property
    def is_supported(self) -> bool:
        return self.supported


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def clean_store():
    store.clear()
    yield
    store.clear()


@pytest.fixture
def transcript() -> list[Segment]:
    return [
        Segment(0.0, 4.0, "Hello everyone and welcome"),
        Segment(4.0, 9.5, "Today we talk about pacing"),
        Segment(12.0, 15.0, "Thanks"),
    ]
