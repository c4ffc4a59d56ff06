"""
Notes and highlight annotations.

A Note is either:
- a timeline note: content pinned to a playback timestamp on one of the player tabs, or
- a highlight annotation: content bound to [highlight_start, highlight_end) character offsets
  inside one transcript segment's text, drawn with a color.

Notes are owned by the store; the resolver only reads them.
"""
from __future__ import annotations

import enum
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any


class NoteType(str, enum.Enum):
    ORIGINAL = "ORIGINAL"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    TRANSCRIPT = "TRANSCRIPT"


@dataclass(frozen=True)
class HighlightColor:
    hex: str
    label: str


HIGHLIGHT_COLORS: tuple[HighlightColor, ...] = (
    HighlightColor("#FDE047", "Yellow"),
    HighlightColor("#86EFAC", "Green"),
    HighlightColor("#93C5FD", "Blue"),
    HighlightColor("#F9A8D4", "Pink"),
    HighlightColor("#FCA5A5", "Red"),
)
DEFAULT_HIGHLIGHT_COLOR = HIGHLIGHT_COLORS[0].hex


def _new_id() -> str:
    return uuid.uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Note:
    """
    timestamp: playback position in seconds (timeline notes); 0.0 for highlights unless set.
    created_at: unix_ms.
    """

    project_id: str
    type: NoteType
    content: str
    timestamp: float = 0.0
    id: str = field(default_factory=_new_id)
    created_at: int = field(default_factory=_now_ms)
    segment_index: int | None = None
    quote: str | None = None
    highlight_start: int | None = None
    highlight_end: int | None = None
    color: str | None = None

    @property
    def is_highlight(self) -> bool:
        return (
            self.segment_index is not None
            and self.highlight_start is not None
            and self.highlight_end is not None
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass(frozen=True)
class SelectionPoint:
    """One end of a user selection, already resolved to (segment index, character offset)."""

    segment_index: int
    offset: int


@dataclass(frozen=True)
class SegmentSelection:
    """A selection confined to one segment; start <= end, offsets into the segment's full text."""

    segment_index: int
    start: int
    end: int
    quote: str


@dataclass(frozen=True)
class HighlightDraft:
    """Fields of a new highlight annotation. The caller persists it and assigns identity."""

    segment_index: int
    content: str
    quote: str
    highlight_start: int
    highlight_end: int
    color: str

    def to_note(self, project_id: str) -> Note:
        return Note(
            project_id=project_id,
            type=NoteType.TRANSCRIPT,
            content=self.content,
            segment_index=self.segment_index,
            quote=self.quote,
            highlight_start=self.highlight_start,
            highlight_end=self.highlight_end,
            color=self.color,
        )


@dataclass(frozen=True)
class PartitionRun:
    """[start, end) slice of a segment's text; annotation is the winning highlight or None."""

    start: int
    end: int
    text: str
    annotation: Note | None = None

    @property
    def color(self) -> str | None:
        if self.annotation is None:
            return None
        return self.annotation.color or DEFAULT_HIGHLIGHT_COLOR
