"""Transcript: segment model and live segmentation from recognizer events."""
from .models import Segment, TranscriptError, transcript_from_payload, validate_transcript
from .tracker import LiveSegmentationTracker, LiveSession, SessionState

__all__ = [
    "LiveSegmentationTracker",
    "LiveSession",
    "Segment",
    "SessionState",
    "TranscriptError",
    "transcript_from_payload",
    "validate_transcript",
]
