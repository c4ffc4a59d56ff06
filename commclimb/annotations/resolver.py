"""
Highlight range resolver: overlapping highlights -> flat list of render runs.

Boundaries are 0, len(text) and every highlight's start/end (clamped to the text).
Each pair of consecutive distinct boundaries is one run. A run belongs to the
highlight added last (list order) among those covering the run's midpoint; runs with
no covering highlight are plain text.

Runs concatenate back to the original text, never overlap, leave no gaps, and number
at most 2 * len(highlights) + 1.

Highlights with missing offsets (timeline notes) or start > end after clamping are
skipped. Stale annotation data must never break rendering of the rest of the segment.
"""
from __future__ import annotations

import logging
from typing import Sequence

from commclimb.annotations.models import (
    DEFAULT_HIGHLIGHT_COLOR,
    HighlightDraft,
    Note,
    PartitionRun,
    SegmentSelection,
    SelectionPoint,
)
from commclimb.transcript.models import Segment

logger = logging.getLogger(__name__)


def _clamp(value: int, length: int) -> int:
    return max(0, min(value, length))


def _clamped_ranges(length: int, annotations: Sequence[Note]) -> list[tuple[int, int, Note]]:
    ranges: list[tuple[int, int, Note]] = []
    for note in annotations:
        if note.highlight_start is None or note.highlight_end is None:
            continue
        start = _clamp(note.highlight_start, length)
        end = _clamp(note.highlight_end, length)
        if start > end:
            logger.debug("Skipping inverted highlight %s (%d > %d)", note.id, start, end)
            continue
        ranges.append((start, end, note))
    return ranges


def resolve_runs(text: str, annotations: Sequence[Note]) -> list[PartitionRun]:
    """Partition text into runs; annotations are in the order they were added."""
    length = len(text)
    ranges = _clamped_ranges(length, annotations)

    points = {0, length}
    for start, end, _ in ranges:
        points.add(start)
        points.add(end)
    boundaries = sorted(points)

    runs: list[PartitionRun] = []
    for start, end in zip(boundaries, boundaries[1:]):
        if start >= end:
            continue
        mid = (start + end) / 2
        active: Note | None = None
        for r_start, r_end, note in reversed(ranges):
            if r_start <= mid <= r_end:
                active = note
                break
        runs.append(PartitionRun(start=start, end=end, text=text[start:end], annotation=active))
    return runs


def resolve_segment_runs(
    transcript: Sequence[Segment],
    segment_index: int,
    notes: Sequence[Note],
) -> list[PartitionRun]:
    """Runs for one segment, using only the notes bound to it. IndexError for an unknown segment."""
    if not 0 <= segment_index < len(transcript):
        raise IndexError(f"Segment {segment_index} out of range (transcript has {len(transcript)})")
    segment_notes = [n for n in notes if n.segment_index == segment_index]
    return resolve_runs(transcript[segment_index].text, segment_notes)


def capture_selection(
    transcript: Sequence[Segment],
    anchor: SelectionPoint,
    focus: SelectionPoint,
) -> SegmentSelection | None:
    """
    Turn a selection (anchor/focus in either order) into a single-segment range.
    Returns None when there is no valid selection: the endpoints lie in different
    segments, the segment does not exist, or nothing is selected.
    """
    if anchor.segment_index != focus.segment_index:
        logger.debug(
            "Selection spans segments %d and %d; rejected", anchor.segment_index, focus.segment_index
        )
        return None
    index = anchor.segment_index
    if not 0 <= index < len(transcript):
        return None
    text = transcript[index].text
    a = _clamp(anchor.offset, len(text))
    b = _clamp(focus.offset, len(text))
    start, end = min(a, b), max(a, b)
    if start == end:
        return None
    return SegmentSelection(segment_index=index, start=start, end=end, quote=text[start:end])


def build_highlight(
    selection: SegmentSelection,
    content: str,
    color: str | None = None,
) -> HighlightDraft | None:
    """Draft a highlight annotation for a selection; None when the note text is blank."""
    if not (content or "").strip():
        return None
    return HighlightDraft(
        segment_index=selection.segment_index,
        content=content,
        quote=selection.quote,
        highlight_start=selection.start,
        highlight_end=selection.end,
        color=color or DEFAULT_HIGHLIGHT_COLOR,
    )
