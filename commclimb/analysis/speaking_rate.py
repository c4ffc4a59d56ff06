"""
Speaking-rate analysis: words per minute per segment and over the whole talk.

Global duration is the wall-clock span last.end_time - first.start_time, pauses included,
not the sum of segment durations. A zero (or negative) duration always yields 0 wpm.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from commclimb.transcript.models import Segment


@dataclass(frozen=True)
class PaceCategory:
    label: str
    description: str
    lower_wpm: int  # inclusive; the category holds until the next one's lower bound


# Ordered by lower bound; boundaries belong to the higher bucket.
PACE_CATEGORIES: tuple[PaceCategory, ...] = (
    PaceCategory(
        "Slow", "Deliberate and thoughtful, but potentially disengaging if too prolonged.", 0
    ),
    PaceCategory("Moderate", "Clear and articulate. Good for instructional content.", 110),
    PaceCategory(
        "Conversational",
        "Natural and engaging. Ideal for storytelling and general communication.",
        130,
    ),
    PaceCategory("Fast", "Energetic and passionate, but ensure you maintain clarity.", 160),
)


@dataclass(frozen=True)
class RateSample:
    segment: Segment
    word_count: int
    duration: float
    wpm: int


@dataclass
class RateSummary:
    wpm: int
    total_words: int
    duration: float
    samples: list[RateSample] = field(default_factory=list)

    @property
    def category(self) -> PaceCategory:
        return pace_category(self.wpm)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_words(text: str) -> int:
    return len((text or "").split())


def words_per_minute(words: int, duration: float) -> int:
    if duration <= 0:
        return 0
    return _round_half_up(words / duration * 60)


def pace_category(wpm: float) -> PaceCategory:
    category = PACE_CATEGORIES[0]
    for candidate in PACE_CATEGORIES:
        if wpm >= candidate.lower_wpm:
            category = candidate
    return category


def sample_segment(segment: Segment) -> RateSample:
    words = count_words(segment.text)
    duration = segment.end_time - segment.start_time
    return RateSample(
        segment=segment,
        word_count=words,
        duration=duration,
        wpm=words_per_minute(words, duration),
    )


def analyze_transcript(transcript: Sequence[Segment]) -> RateSummary:
    """Per-segment samples and global pace. Empty transcript -> all zeros, no samples."""
    if not transcript:
        return RateSummary(wpm=0, total_words=0, duration=0.0, samples=[])
    samples = [sample_segment(seg) for seg in transcript]
    total_words = sum(s.word_count for s in samples)
    total_duration = transcript[-1].end_time - transcript[0].start_time
    return RateSummary(
        wpm=words_per_minute(total_words, total_duration),
        total_words=total_words,
        duration=total_duration,
        samples=samples,
    )
