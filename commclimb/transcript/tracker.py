"""
Live segmentation: recognizer events -> ordered, non-overlapping transcript segments.

Each confirmed (final) result closes one segment that runs from the boundary cursor to
the event's elapsed time; the cursor then moves to that end time. The cursor never moves
backwards, so start times are non-decreasing and segments never overlap. Zero-length
segments are allowed.

Session lifecycle is explicit: created -> active -> stopped. Only the active session
accepts events. Once stopped, late results and pending auto-restarts for it are ignored,
so stop() cannot be undone by a racing "end" event.
"""
from __future__ import annotations

import enum
import logging
import time
import uuid
from typing import Callable

from commclimb.recognition.base import (
    RecognitionResult,
    RecognitionUnsupportedError,
    Recognizer,
    RecognizerError,
)
from commclimb.transcript.models import Segment

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class SessionState(str, enum.Enum):
    CREATED = "created"
    ACTIVE = "active"
    STOPPED = "stopped"


class LiveSession:
    """One recording session. Owns its segment list and boundary cursor."""

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.state = SessionState.CREATED
        self.started_at: float = 0.0
        self.cursor: float = 0.0
        self._segments: list[Segment] = []

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def segments(self) -> list[Segment]:
        return list(self._segments)

    def activate(self, instant: float) -> None:
        if self.state is not SessionState.CREATED:
            raise RuntimeError(f"Session {self.session_id} cannot be activated from {self.state.value}")
        self.started_at = instant
        self.cursor = 0.0
        self._segments = []
        self.state = SessionState.ACTIVE

    def handle_final_result(self, text: str, instant: float) -> Segment | None:
        """
        Commit one final result. Returns the new segment, or None when the text is empty
        after trimming (recognizer noise) or the session is not active.
        """
        if not self.is_active:
            logger.debug("Session %s not active, ignoring result", self.session_id)
            return None
        text = (text or "").strip()
        if not text:
            return None
        end_time = max(self.cursor, instant - self.started_at)
        segment = Segment(start_time=self.cursor, end_time=end_time, text=text)
        self._segments.append(segment)
        self.cursor = end_time
        return segment

    def close(self) -> list[Segment]:
        self.state = SessionState.STOPPED
        return self.segments


class LiveSegmentationTracker:
    """
    Wires a Recognizer to the current LiveSession.

    - Results are processed one by one in delivery order; nothing is buffered or merged.
    - Recognizer errors are logged and do not stop the session.
    - When the recognizer ends itself while the session is active, one restart is
      attempted; a refused restart (e.g. already running) is ignored.
    """

    def __init__(self, recognizer: Recognizer | None, clock: Clock = time.monotonic) -> None:
        self._recognizer = recognizer
        self._clock = clock
        self._session: LiveSession | None = None
        if recognizer is not None:
            recognizer.bind(
                on_result=self.handle_results,
                on_error=self.handle_error,
                on_end=self.handle_end,
            )

    def is_supported(self) -> bool:
        return self._recognizer is not None and self._recognizer.is_supported

    @property
    def session(self) -> LiveSession | None:
        return self._session

    @property
    def is_listening(self) -> bool:
        return self._session is not None and self._session.is_active

    @property
    def segments(self) -> list[Segment]:
        return self._session.segments if self._session is not None else []

    def start(self) -> LiveSession:
        """Begin a new, disjoint session. Raises RecognitionUnsupportedError without a recognizer."""
        if not self.is_supported():
            raise RecognitionUnsupportedError("Speech recognition is not supported")
        if self._session is not None and self._session.is_active:
            logger.info("Session %s still active; closing it before restart", self._session.session_id)
            self._session.close()
        session = LiveSession()
        session.activate(self._clock())
        self._session = session
        try:
            self._recognizer.start()
        except RecognizerError as e:
            logger.error("Failed to start recognition: %s", e)
        logger.info("Live session %s started", session.session_id)
        return session

    def handle_results(self, results: list[RecognitionResult]) -> None:
        """One recognizer callback; several final results may arrive in the same batch."""
        for result in results:
            if result.is_final:
                self.handle_final_result(result.text)

    def handle_final_result(self, text: str, instant: float | None = None) -> Segment | None:
        if self._session is None:
            return None
        if instant is None:
            instant = self._clock()
        return self._session.handle_final_result(text, instant)

    def handle_error(self, error: str) -> None:
        logger.warning("Speech recognition error: %s", error)

    def handle_end(self) -> None:
        """Recognizer stopped itself (e.g. on silence). Restart only while the session is active."""
        if not self.is_listening:
            return
        try:
            self._recognizer.start()
        except RecognizerError as e:
            logger.debug("Recognizer restart ignored: %s", e)

    def stop(self) -> list[Segment]:
        """Finish the session and return its transcript. Empty when recognition is unsupported."""
        if not self.is_supported() or self._session is None:
            return []
        segments = self._session.close()
        try:
            self._recognizer.stop()
        except RecognizerError as e:
            logger.warning("Recognizer stop failed: %s", e)
        logger.info(
            "Live session %s stopped with %d segments", self._session.session_id, len(segments)
        )
        return segments
