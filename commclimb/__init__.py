"""CommClimb: talk transcripts, highlight annotations and speaking-pace analysis."""

__version__ = "0.1.0"
