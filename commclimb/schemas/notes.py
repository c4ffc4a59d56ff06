"""Schemas for timeline notes, highlight annotations and render runs."""
from __future__ import annotations

from pydantic import BaseModel, Field

from commclimb.annotations.models import Note, NoteType, PartitionRun


class NoteCreate(BaseModel):
    """Request body for POST /api/projects/{id}/notes (timeline note on a player tab)."""

    type: NoteType = Field(NoteType.ORIGINAL, description="ORIGINAL | VIDEO | AUDIO")
    content: str = Field(..., description="Note text (must not be blank)")
    timestamp: float = Field(0.0, ge=0.0, description="Playback position in seconds")


class SelectionPointSchema(BaseModel):
    segment_index: int = Field(..., description="Index of the segment containing this endpoint")
    offset: int = Field(..., description="Character offset into the segment's full text")


class HighlightCreate(BaseModel):
    """
    Request body for POST /api/projects/{id}/highlights.
    anchor/focus are the selection endpoints as resolved by the rendering layer.
    """

    anchor: SelectionPointSchema
    focus: SelectionPointSchema
    content: str = Field(..., description="The user's note on the highlighted quote")
    color: str | None = Field(None, description="Highlight color (hex); defaults to yellow")


class NoteResponse(BaseModel):
    id: str
    project_id: str
    type: NoteType
    content: str
    timestamp: float
    created_at: int = Field(..., description="unix_ms")
    segment_index: int | None = None
    quote: str | None = None
    highlight_start: int | None = None
    highlight_end: int | None = None
    color: str | None = None

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(**note.to_dict())


class RunResponse(BaseModel):
    """One render run of a segment; note_id/color/content are null for plain text."""

    start: int
    end: int
    text: str
    note_id: str | None = None
    color: str | None = None
    content: str | None = None

    @classmethod
    def from_run(cls, run: PartitionRun) -> "RunResponse":
        note = run.annotation
        return cls(
            start=run.start,
            end=run.end,
            text=run.text,
            note_id=note.id if note else None,
            color=run.color,
            content=note.content if note else None,
        )
