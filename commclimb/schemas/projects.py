"""Schemas for project, transcript and speaking-rate endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from commclimb.analysis.speaking_rate import RateSummary, pace_category
from commclimb.store import Project
from commclimb.transcript.models import Segment


class SegmentSchema(BaseModel):
    """One transcript segment (seconds from start of recording)."""

    start_time: float = Field(..., ge=0.0, description="Segment start in seconds")
    end_time: float = Field(..., ge=0.0, description="Segment end in seconds")
    text: str = Field("", description="Spoken text")

    @classmethod
    def from_segment(cls, segment: Segment) -> "SegmentSchema":
        return cls(start_time=segment.start_time, end_time=segment.end_time, text=segment.text)

    def to_segment(self) -> Segment:
        return Segment(start_time=self.start_time, end_time=self.end_time, text=self.text)


class ProjectCreate(BaseModel):
    """Request body for POST /api/projects (e.g. after a live recording finished)."""

    name: str | None = Field(None, description="Display name; defaults to 'Recording <date>'")
    duration: float | None = Field(None, ge=0.0, description="Recording length in seconds")
    transcript: list[SegmentSchema] = Field(default_factory=list)


class ProjectRename(BaseModel):
    name: str = Field(..., description="New display name (must not be blank)")

    @field_validator("name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value.strip()


class ProjectResponse(BaseModel):
    id: str
    user_id: str
    name: str
    created_at: int = Field(..., description="unix_ms")
    duration: float | None = None
    is_transcribing: bool = False
    transcript: list[SegmentSchema] = Field(default_factory=list)

    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            user_id=project.user_id,
            name=project.name,
            created_at=project.created_at,
            duration=project.duration,
            is_transcribing=project.is_transcribing,
            transcript=[SegmentSchema.from_segment(s) for s in project.transcript],
        )


class RateSampleSchema(BaseModel):
    start_time: float
    end_time: float
    text: str
    word_count: int
    duration: float
    wpm: int
    category: str = Field(..., description="Pace label for this segment's wpm")


class SpeakingRateResponse(BaseModel):
    """Response body for GET /api/projects/{id}/speaking-rate. Empty samples = no data yet."""

    wpm: int
    total_words: int
    duration: float = Field(..., description="last.end_time - first.start_time, pauses included")
    category: str
    category_description: str
    segments: list[RateSampleSchema] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: RateSummary) -> "SpeakingRateResponse":
        return cls(
            wpm=summary.wpm,
            total_words=summary.total_words,
            duration=summary.duration,
            category=summary.category.label,
            category_description=summary.category.description,
            segments=[
                RateSampleSchema(
                    start_time=s.segment.start_time,
                    end_time=s.segment.end_time,
                    text=s.segment.text,
                    word_count=s.word_count,
                    duration=s.duration,
                    wpm=s.wpm,
                    category=pace_category(s.wpm).label,
                )
                for s in summary.samples
            ],
        )
