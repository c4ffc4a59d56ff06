"""Tests for the in-memory project/note store."""

from __future__ import annotations

import pytest

from commclimb import store
from commclimb.annotations.models import Note, NoteType
from commclimb.transcript.models import Segment


class TestProjects:
    def test_create_defaults_name(self) -> None:
        project = store.create_project("guest")
        assert project.name.startswith("Recording ")
        assert store.get_project(project.id) is project

    def test_list_by_user(self) -> None:
        store.create_project("guest", "mine")
        store.create_project("other", "theirs")
        assert [p.name for p in store.list_projects("guest")] == ["mine"]

    def test_rename_rejects_blank(self) -> None:
        project = store.create_project("guest", "Keynote")
        with pytest.raises(ValueError):
            store.rename_project(project.id, "   ")
        assert store.rename_project(project.id, " Dry run ").name == "Dry run"

    def test_set_transcript_replaces_whole_sequence(self) -> None:
        project = store.create_project("guest", transcript=[Segment(0.0, 1.0, "old")])
        store.set_transcribing(project.id, True)
        updated = store.set_transcript(project.id, [Segment(0.0, 2.0, "new")])
        assert [s.text for s in updated.transcript] == ["new"]
        assert not updated.is_transcribing

    def test_missing_project(self) -> None:
        with pytest.raises(store.ProjectNotFound):
            store.get_project("nope")

    def test_delete_cascades_notes(self) -> None:
        keep = store.create_project("guest", "keep")
        drop = store.create_project("guest", "drop")
        store.add_note(Note(project_id=keep.id, type=NoteType.AUDIO, content="a"))
        store.add_note(Note(project_id=drop.id, type=NoteType.AUDIO, content="b"))

        assert store.delete_project(drop.id)
        assert not store.delete_project(drop.id)
        assert not store.project_exists(drop.id)
        assert store.list_notes(drop.id) == []
        assert [n.content for n in store.list_notes(keep.id)] == ["a"]


class TestNotes:
    def test_notes_sorted_by_timestamp(self) -> None:
        project = store.create_project("guest")
        for ts, content in ((12.0, "late"), (1.5, "early"), (6.0, "middle")):
            store.add_note(
                Note(project_id=project.id, type=NoteType.ORIGINAL, content=content, timestamp=ts)
            )
        assert [n.content for n in store.list_notes(project.id)] == ["early", "middle", "late"]

    def test_notes_for_segment_keep_insertion_order(self) -> None:
        project = store.create_project("guest")
        first = store.add_note(
            Note(project_id=project.id, type=NoteType.TRANSCRIPT, content="1", segment_index=2)
        )
        store.add_note(
            Note(project_id=project.id, type=NoteType.TRANSCRIPT, content="x", segment_index=0)
        )
        second = store.add_note(
            Note(project_id=project.id, type=NoteType.TRANSCRIPT, content="2", segment_index=2)
        )
        assert store.notes_for_segment(project.id, 2) == [first, second]

    def test_note_for_unknown_project(self) -> None:
        with pytest.raises(store.ProjectNotFound):
            store.add_note(Note(project_id="missing", type=NoteType.VIDEO, content="x"))

    def test_delete_note(self) -> None:
        project = store.create_project("guest")
        note = store.add_note(Note(project_id=project.id, type=NoteType.VIDEO, content="x"))
        assert store.delete_note(note.id)
        assert not store.delete_note(note.id)
        with pytest.raises(store.NoteNotFound):
            store.get_note(note.id)
