"""Pydantic schemas for API request/response."""
from commclimb.schemas.notes import (
    HighlightCreate,
    NoteCreate,
    NoteResponse,
    RunResponse,
    SelectionPointSchema,
)
from commclimb.schemas.projects import (
    ProjectCreate,
    ProjectRename,
    ProjectResponse,
    RateSampleSchema,
    SegmentSchema,
    SpeakingRateResponse,
)

__all__ = [
    "HighlightCreate",
    "NoteCreate",
    "NoteResponse",
    "ProjectCreate",
    "ProjectRename",
    "ProjectResponse",
    "RateSampleSchema",
    "RunResponse",
    "SegmentSchema",
    "SelectionPointSchema",
    "SpeakingRateResponse",
]
