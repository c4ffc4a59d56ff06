"""Annotations: notes, highlight drafting and overlap resolution for rendering."""
from .models import (
    DEFAULT_HIGHLIGHT_COLOR,
    HIGHLIGHT_COLORS,
    HighlightDraft,
    Note,
    NoteType,
    PartitionRun,
    SegmentSelection,
    SelectionPoint,
)
from .resolver import build_highlight, capture_selection, resolve_runs, resolve_segment_runs

__all__ = [
    "DEFAULT_HIGHLIGHT_COLOR",
    "HIGHLIGHT_COLORS",
    "HighlightDraft",
    "Note",
    "NoteType",
    "PartitionRun",
    "SegmentSelection",
    "SelectionPoint",
    "build_highlight",
    "capture_selection",
    "resolve_runs",
    "resolve_segment_runs",
]
