"""Tests for live segmentation: ordering, empty results, auto-restart, session lifecycle."""

from __future__ import annotations

import logging

import pytest

from commclimb.recognition.base import RecognitionResult, RecognitionUnsupportedError
from commclimb.transcript.models import Segment
from commclimb.transcript.tracker import LiveSegmentationTracker, LiveSession, SessionState
from tests.conftest import FakeClock, FakeRecognizer


def _final(text: str) -> RecognitionResult:
    return RecognitionResult(text=text, is_final=True)


class TestSegmentation:
    def test_segments_abut_and_follow_elapsed_time(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        clock.advance(2.5)
        recognizer.emit_results([_final("  hello there ")])
        clock.advance(3.0)
        recognizer.emit_results([_final("second part")])

        segments = tracker.stop()
        assert segments == [
            Segment(0.0, 2.5, "hello there"),
            Segment(2.5, 5.5, "second part"),
        ]

    def test_start_times_non_decreasing(self, recognizer: FakeRecognizer, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        for step in (0.4, 1.2, 0.0, 3.3, 0.7):
            clock.advance(step)
            tracker.handle_final_result("word")
        segments = tracker.stop()
        assert len(segments) == 5
        for seg in segments:
            assert seg.start_time <= seg.end_time
        for prev, nxt in zip(segments, segments[1:]):
            assert prev.start_time <= nxt.start_time
            assert prev.end_time == nxt.start_time

    def test_empty_text_is_discarded_without_cursor_advance(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        session = tracker.start()
        clock.advance(2.0)
        assert tracker.handle_final_result("   ") is None
        assert session.cursor == 0.0
        assert tracker.segments == []

        clock.advance(1.0)
        seg = tracker.handle_final_result("after noise")
        assert seg == Segment(0.0, 3.0, "after noise")

    def test_zero_duration_segment_allowed(self, recognizer: FakeRecognizer, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        clock.advance(1.0)
        tracker.handle_final_result("one")
        tracker.handle_final_result("two")
        segments = tracker.stop()
        assert segments[1] == Segment(1.0, 1.0, "two")

    def test_batch_processed_in_order_and_non_final_ignored(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        clock.advance(1.5)
        recognizer.emit_results(
            [
                _final("first"),
                RecognitionResult(text="maybe", is_final=False),
                _final("second"),
            ]
        )
        assert [s.text for s in tracker.segments] == ["first", "second"]

    def test_explicit_instant_overrides_clock(self, recognizer: FakeRecognizer, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        seg = tracker.handle_final_result("hi", instant=clock.now + 4.0)
        assert seg == Segment(0.0, 4.0, "hi")


class TestAutoRestart:
    def test_end_while_listening_restarts_once_and_keeps_cursor(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        clock.advance(2.0)
        recognizer.emit_results([_final("before silence")])
        assert recognizer.start_calls == 1

        recognizer.emit_end()
        assert recognizer.start_calls == 2
        assert tracker.is_listening

        clock.advance(3.0)
        recognizer.emit_results([_final("after restart")])
        segments = tracker.stop()
        assert segments == [
            Segment(0.0, 2.0, "before silence"),
            Segment(2.0, 5.0, "after restart"),
        ]

    def test_restart_failure_is_swallowed(self, recognizer: FakeRecognizer, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        recognizer.fail_start = True
        recognizer.emit_end()
        assert recognizer.start_calls == 2
        assert tracker.is_listening

    def test_end_after_stop_does_not_restart(self, recognizer: FakeRecognizer, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        tracker.stop()
        recognizer.emit_end()
        assert recognizer.start_calls == 1
        assert not tracker.is_listening

    def test_error_is_logged_and_session_continues(
        self, recognizer: FakeRecognizer, clock: FakeClock, caplog: pytest.LogCaptureFixture
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        with caplog.at_level(logging.WARNING, logger="commclimb.transcript.tracker"):
            recognizer.emit_error("network")
        assert "network" in caplog.text
        assert tracker.is_listening
        clock.advance(1.0)
        recognizer.emit_results([_final("still here")])
        assert len(tracker.segments) == 1


class TestSessionLifecycle:
    def test_late_results_after_stop_are_ignored(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        session = tracker.start()
        clock.advance(1.0)
        recognizer.emit_results([_final("kept")])
        result = tracker.stop()
        recognizer.emit_results([_final("late")])

        assert session.state is SessionState.STOPPED
        assert [s.text for s in result] == ["kept"]
        assert [s.text for s in session.segments] == ["kept"]
        assert recognizer.stop_calls == 1

    def test_stop_returns_copy(self, recognizer: FakeRecognizer, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        tracker.start()
        tracker.handle_final_result("a")
        result = tracker.stop()
        result.clear()
        assert len(tracker.segments) == 1

    def test_new_start_begins_disjoint_session(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        first = tracker.start()
        clock.advance(5.0)
        tracker.handle_final_result("first talk")
        tracker.stop()

        clock.advance(100.0)
        second = tracker.start()
        clock.advance(2.0)
        tracker.handle_final_result("second talk")

        assert first.session_id != second.session_id
        assert tracker.stop() == [Segment(0.0, 2.0, "second talk")]
        assert [s.text for s in first.segments] == ["first talk"]

    def test_start_while_active_does_not_crash(
        self, recognizer: FakeRecognizer, clock: FakeClock
    ) -> None:
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        first = tracker.start()
        recognizer.fail_start = True
        second = tracker.start()
        assert first.state is SessionState.STOPPED
        assert second.is_active
        assert tracker.segments == []

    def test_session_cannot_be_reactivated(self) -> None:
        session = LiveSession()
        session.activate(0.0)
        session.close()
        with pytest.raises(RuntimeError):
            session.activate(10.0)
        assert session.handle_final_result("ignored", 12.0) is None


class TestUnsupported:
    def test_unsupported_recognizer_never_starts(self, clock: FakeClock) -> None:
        recognizer = FakeRecognizer(supported=False)
        tracker = LiveSegmentationTracker(recognizer, clock=clock)
        assert not tracker.is_supported()
        with pytest.raises(RecognitionUnsupportedError):
            tracker.start()
        assert recognizer.start_calls == 0
        assert tracker.stop() == []
        assert recognizer.stop_calls == 0

    def test_missing_recognizer(self, clock: FakeClock) -> None:
        tracker = LiveSegmentationTracker(None, clock=clock)
        assert not tracker.is_supported()
        assert tracker.stop() == []
        assert tracker.handle_final_result("nothing") is None
