"""
FastAPI app: record a talk, get a timed transcript, annotate it, review speaking pace.

HTTP API: projects (recording + transcript), remote transcription, timeline notes,
transcript highlights with render runs, speaking-rate analysis.
WebSocket /ws/live: live captioning driven by the client's speech recognizer.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect

from commclimb import store
from commclimb.analysis.speaking_rate import analyze_transcript
from commclimb.annotations.models import Note, NoteType, SelectionPoint
from commclimb.annotations.resolver import (
    build_highlight,
    capture_selection,
    resolve_segment_runs,
)
from commclimb.config import configure_logging, get_settings
from commclimb.live_manager import LiveCaptionManager
from commclimb.schemas.notes import (
    HighlightCreate,
    NoteCreate,
    NoteResponse,
    RunResponse,
)
from commclimb.schemas.projects import (
    ProjectCreate,
    ProjectRename,
    ProjectResponse,
    SpeakingRateResponse,
)
from commclimb.transcript.models import TranscriptError, validate_transcript
from commclimb.transcription import (
    TranscriptionEngine,
    TranscriptionError,
    get_transcription_engine,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="CommClimb",
    description="Talk transcripts, highlights and speaking-pace analysis",
    lifespan=lifespan,
)


def _get_project_or_404(project_id: str) -> store.Project:
    try:
        return store.get_project(project_id)
    except store.ProjectNotFound:
        raise HTTPException(status_code=404, detail="Project not found")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


# --- Projects ---


@app.post("/api/projects", response_model=ProjectResponse, status_code=201)
async def create_project(request: ProjectCreate) -> ProjectResponse:
    try:
        transcript = validate_transcript(s.to_segment() for s in request.transcript)
    except TranscriptError as e:
        raise HTTPException(status_code=422, detail=str(e))
    project = store.create_project(
        user_id=get_settings().GUEST_USER_ID,
        name=request.name,
        transcript=transcript,
        duration=request.duration,
    )
    logger.info("Project %s created with %d segments", project.id, len(transcript))
    return ProjectResponse.from_project(project)


@app.get("/api/projects", response_model=list[ProjectResponse])
async def list_projects() -> list[ProjectResponse]:
    projects = store.list_projects(get_settings().GUEST_USER_ID)
    return [ProjectResponse.from_project(p) for p in projects]


@app.get("/api/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str) -> ProjectResponse:
    return ProjectResponse.from_project(_get_project_or_404(project_id))


@app.patch("/api/projects/{project_id}", response_model=ProjectResponse)
async def rename_project(project_id: str, request: ProjectRename) -> ProjectResponse:
    _get_project_or_404(project_id)
    try:
        project = store.rename_project(project_id, request.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ProjectResponse.from_project(project)


@app.delete("/api/projects/{project_id}", status_code=204)
async def delete_project(project_id: str) -> None:
    if not store.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")


@app.post("/api/projects/{project_id}/transcribe", response_model=ProjectResponse)
async def transcribe_project(
    project_id: str,
    request: Request,
    engine: TranscriptionEngine = Depends(get_transcription_engine),
) -> ProjectResponse:
    """
    Raw recording bytes in the body, mime type in Content-Type. Replaces the project's
    transcript with the remote engine's result. Failures are not retried.
    """
    _get_project_or_404(project_id)
    mime_type = (request.headers.get("content-type") or "").split(";")[0].strip()
    if not mime_type.startswith(("audio/", "video/")):
        raise HTTPException(status_code=415, detail="Content-Type must be audio/* or video/*")
    media = await request.body()
    if not media:
        raise HTTPException(status_code=400, detail="Request body is empty")
    if len(media) > get_settings().MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Recording too large")

    store.set_transcribing(project_id, True)
    try:
        transcript = await engine.transcribe(media, mime_type)
    except Exception as e:
        logger.exception("Transcription failed for project %s (engine=%s)", project_id, engine.name)
        detail = str(e) if isinstance(e, TranscriptionError) else type(e).__name__
        raise HTTPException(status_code=502, detail=f"Transcription failed: {detail}")
    finally:
        if store.project_exists(project_id):
            store.set_transcribing(project_id, False)
    try:
        project = store.set_transcript(project_id, transcript)
    except store.ProjectNotFound:
        raise HTTPException(status_code=404, detail="Project was deleted during transcription")
    return ProjectResponse.from_project(project)


@app.get("/api/projects/{project_id}/speaking-rate", response_model=SpeakingRateResponse)
async def speaking_rate(project_id: str) -> SpeakingRateResponse:
    project = _get_project_or_404(project_id)
    return SpeakingRateResponse.from_summary(analyze_transcript(project.transcript))


# --- Notes ---


@app.get("/api/projects/{project_id}/notes", response_model=list[NoteResponse])
async def list_notes(project_id: str, type: NoteType | None = None) -> list[NoteResponse]:
    _get_project_or_404(project_id)
    notes = store.list_notes(project_id)
    if type is not None:
        notes = [n for n in notes if n.type is type]
    return [NoteResponse.from_note(n) for n in notes]


@app.post("/api/projects/{project_id}/notes", response_model=NoteResponse, status_code=201)
async def add_note(project_id: str, request: NoteCreate) -> NoteResponse:
    _get_project_or_404(project_id)
    if not request.content.strip():
        raise HTTPException(status_code=400, detail="content is required")
    if request.type is NoteType.TRANSCRIPT:
        raise HTTPException(status_code=400, detail="Use /highlights for transcript notes")
    note = store.add_note(
        Note(
            project_id=project_id,
            type=request.type,
            content=request.content,
            timestamp=request.timestamp,
        )
    )
    return NoteResponse.from_note(note)


@app.delete("/api/notes/{note_id}", status_code=204)
async def delete_note(note_id: str) -> None:
    if not store.delete_note(note_id):
        raise HTTPException(status_code=404, detail="Note not found")


# --- Transcript highlights ---


@app.post("/api/projects/{project_id}/highlights", response_model=NoteResponse, status_code=201)
async def add_highlight(project_id: str, request: HighlightCreate) -> NoteResponse:
    project = _get_project_or_404(project_id)
    selection = capture_selection(
        project.transcript,
        SelectionPoint(request.anchor.segment_index, request.anchor.offset),
        SelectionPoint(request.focus.segment_index, request.focus.offset),
    )
    if selection is None:
        raise HTTPException(status_code=422, detail="No valid selection")
    draft = build_highlight(selection, request.content, request.color)
    if draft is None:
        raise HTTPException(status_code=400, detail="content is required")
    note = store.add_note(draft.to_note(project_id))
    return NoteResponse.from_note(note)


@app.get(
    "/api/projects/{project_id}/segments/{segment_index}/runs",
    response_model=list[RunResponse],
)
async def segment_runs(project_id: str, segment_index: int) -> list[RunResponse]:
    project = _get_project_or_404(project_id)
    try:
        runs = resolve_segment_runs(
            project.transcript,
            segment_index,
            store.notes_for_segment(project_id, segment_index),
        )
    except IndexError:
        raise HTTPException(status_code=404, detail="Segment not found")
    return [RunResponse.from_run(r) for r in runs]


# --- Live captioning ---


@app.websocket("/ws/live")
async def websocket_live(websocket: WebSocket) -> None:
    """
    WebSocket: client forwards its speech recognizer's events (JSON text frames);
    server sends recognizer commands, committed segments and the final transcript.
    """
    await websocket.accept()
    manager = LiveCaptionManager(websocket)
    try:
        await manager.run()
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Live captioning connection failed")
        try:
            await websocket.close()
        except Exception:
            pass
