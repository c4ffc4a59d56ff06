"""
Segment model: one timed span of spoken text.

A transcript is an ordered list[Segment]:
- start_time <= end_time for every segment
- start_time is non-decreasing across the list
- consecutive segments normally abut (end_time of i == start_time of i+1); gaps are allowed

Segments are immutable. A transcript is replaced as a whole, never edited in place.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable


class TranscriptError(ValueError):
    """Segment data violates the transcript invariants."""


@dataclass(frozen=True)
class Segment:
    """start_time, end_time: seconds from the start of the recording."""

    start_time: float
    end_time: float
    text: str

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """
        Build from a JSON object. Accepts camelCase (startTime/endTime, as returned by the
        transcription model) and snake_case keys.
        """
        try:
            start = data["startTime"] if "startTime" in data else data["start_time"]
            end = data["endTime"] if "endTime" in data else data["end_time"]
            text = data["text"]
        except (KeyError, TypeError) as e:
            raise TranscriptError(f"Segment is missing a field: {e}") from e
        try:
            return cls(start_time=float(start), end_time=float(end), text=str(text or ""))
        except (TypeError, ValueError) as e:
            raise TranscriptError(f"Segment has non-numeric time: {data!r}") from e


def validate_transcript(segments: Iterable[Segment]) -> list[Segment]:
    """Return segments as a list; raise TranscriptError on negative or inverted times, or decreasing starts."""
    out: list[Segment] = []
    prev_start: float | None = None
    for i, seg in enumerate(segments):
        if seg.start_time < 0:
            raise TranscriptError(f"Segment {i} starts before the recording ({seg.start_time})")
        if seg.start_time > seg.end_time:
            raise TranscriptError(
                f"Segment {i} starts after it ends ({seg.start_time} > {seg.end_time})"
            )
        if prev_start is not None and seg.start_time < prev_start:
            raise TranscriptError(f"Segment {i} starts before segment {i - 1}")
        prev_start = seg.start_time
        out.append(seg)
    return out


def transcript_from_payload(items: Any) -> list[Segment]:
    """Parse a JSON array of segment objects into a validated transcript."""
    if not isinstance(items, list):
        raise TranscriptError("Transcript payload is not a JSON array")
    segments = []
    for item in items:
        if not isinstance(item, dict):
            raise TranscriptError(f"Transcript item is not an object: {item!r}")
        segments.append(Segment.from_dict(item))
    return validate_transcript(segments)
