"""
Recognizer: abstract interface for a host speech-recognition capability.

The recognizer itself (e.g. the browser's SpeechRecognition) lives outside this
process. It is driven with start()/stop() and reports back through three callbacks:
- on_result(results): a batch of results, in order; only is_final ones are committed
- on_error(error): recognizer-side error; recoverable
- on_end(): the recognizer stopped itself (e.g. after silence)

start()/stop() are fire-and-forget: they must not block waiting for the host to confirm.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable


@dataclass
class RecognitionResult:
    """One recognizer result. Non-final results may still change."""

    text: str
    is_final: bool = True


ResultCallback = Callable[[list[RecognitionResult]], None]
ErrorCallback = Callable[[str], None]
EndCallback = Callable[[], None]


class RecognizerError(RuntimeError):
    """start/stop rejected by the recognizer (e.g. already running)."""


class RecognitionUnsupportedError(RuntimeError):
    """The host has no speech-recognition capability."""


class Recognizer(ABC):
    """Abstract recognizer. Callbacks are attached once via bind()."""

    def __init__(self) -> None:
        self._on_result: ResultCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_end: EndCallback | None = None

    def bind(
        self,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    def emit_results(self, results: list[RecognitionResult]) -> None:
        if self._on_result is not None:
            self._on_result(results)

    def emit_error(self, error: str) -> None:
        if self._on_error is not None:
            self._on_error(error)

    def emit_end(self) -> None:
        if self._on_end is not None:
            self._on_end()

    @abstractmethod
    def start(self) -> None:
        """Ask the recognizer to start. Raises RecognizerError if it refuses."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Ask the recognizer to stop."""
        ...

    @property
    @abstractmethod
    def is_supported(self) -> bool:
        """Whether the host exposes speech recognition at all."""
        ...
