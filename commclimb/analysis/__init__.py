"""Analysis: speaking-rate statistics over a finished transcript."""
from .speaking_rate import (
    PACE_CATEGORIES,
    PaceCategory,
    RateSample,
    RateSummary,
    analyze_transcript,
    count_words,
    pace_category,
    words_per_minute,
)

__all__ = [
    "PACE_CATEGORIES",
    "PaceCategory",
    "RateSample",
    "RateSummary",
    "analyze_transcript",
    "count_words",
    "pace_category",
    "words_per_minute",
]
