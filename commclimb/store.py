"""
In-memory store for projects (recordings + transcript) and their notes.

Nothing is written to disk; a restart starts empty. Projects are owned by a user id
(the guest user when no accounts are used). Deleting a project deletes its notes.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from commclimb.annotations.models import Note
from commclimb.transcript.models import Segment


class StoreError(LookupError):
    """Base for store lookups that fail."""


class ProjectNotFound(StoreError):
    pass


class NoteNotFound(StoreError):
    pass


@dataclass
class Project:
    """duration: recording length in seconds, as measured by the recorder (optional)."""

    user_id: str
    name: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))
    duration: float | None = None
    is_transcribing: bool = False
    transcript: list[Segment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "created_at": self.created_at,
            "duration": self.duration,
            "is_transcribing": self.is_transcribing,
            "transcript": [s.to_dict() for s in self.transcript],
        }


# project_id -> Project
_projects: dict[str, Project] = {}
# note_id -> Note (insertion order = order notes were added)
_notes: dict[str, Note] = {}


def default_project_name() -> str:
    return f"Recording {time.strftime('%Y-%m-%d %H:%M:%S')}"


def create_project(
    user_id: str,
    name: str | None = None,
    transcript: list[Segment] | None = None,
    duration: float | None = None,
) -> Project:
    project = Project(
        user_id=user_id,
        name=(name or "").strip() or default_project_name(),
        duration=duration,
        transcript=list(transcript or []),
    )
    _projects[project.id] = project
    return project


def get_project(project_id: str) -> Project:
    project = _projects.get(project_id)
    if project is None:
        raise ProjectNotFound(project_id)
    return project


def project_exists(project_id: str) -> bool:
    return project_id in _projects


def list_projects(user_id: str) -> list[Project]:
    return [p for p in _projects.values() if p.user_id == user_id]


def save_project(project: Project) -> Project:
    """Store or overwrite project."""
    _projects[project.id] = project
    return project


def rename_project(project_id: str, name: str) -> Project:
    """Blank names are rejected with ValueError; the project keeps its old name."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Project name must not be empty")
    project = replace(get_project(project_id), name=name)
    return save_project(project)


def set_transcript(project_id: str, transcript: list[Segment]) -> Project:
    """Replace the whole transcript. Highlights keep their segment indices."""
    project = replace(get_project(project_id), transcript=list(transcript), is_transcribing=False)
    return save_project(project)


def set_transcribing(project_id: str, value: bool) -> Project:
    project = replace(get_project(project_id), is_transcribing=value)
    return save_project(project)


def delete_project(project_id: str) -> bool:
    """Remove project and its notes. Return True if it existed."""
    if project_id not in _projects:
        return False
    del _projects[project_id]
    for note_id in [n.id for n in _notes.values() if n.project_id == project_id]:
        del _notes[note_id]
    return True


def add_note(note: Note) -> Note:
    get_project(note.project_id)
    _notes[note.id] = note
    return note


def get_note(note_id: str) -> Note:
    note = _notes.get(note_id)
    if note is None:
        raise NoteNotFound(note_id)
    return note


def list_notes(project_id: str) -> list[Note]:
    """Notes of a project ordered by timestamp; equal timestamps keep insertion order."""
    notes = [n for n in _notes.values() if n.project_id == project_id]
    return sorted(notes, key=lambda n: n.timestamp)


def notes_for_segment(project_id: str, segment_index: int) -> list[Note]:
    """Highlight notes of one segment, in the order they were added."""
    return [
        n
        for n in _notes.values()
        if n.project_id == project_id and n.segment_index == segment_index
    ]


def delete_note(note_id: str) -> bool:
    if note_id in _notes:
        del _notes[note_id]
        return True
    return False


def clear() -> None:
    _projects.clear()
    _notes.clear()
