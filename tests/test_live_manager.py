"""Tests for the live-captioning WebSocket (client-hosted recognizer)."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from commclimb import store
from commclimb.main import app


def _receive_until(ws: Any, msg_type: str, seen: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Read messages until one of msg_type arrives; commands and segments may interleave."""
    while True:
        message = ws.receive_json()
        if seen is not None:
            seen.append(message)
        if message.get("type") == msg_type:
            return message


class TestLiveCaptioning:
    def test_session_segments_and_saved_transcript(self) -> None:
        client = TestClient(app)
        with client.websocket_connect("/ws/live") as ws:
            ws.send_json({"type": "capabilities", "speech_recognition": True})
            ws.send_json({"type": "start"})
            seen: list[dict[str, Any]] = []
            session = _receive_until(ws, "session", seen)
            assert session["session_id"]

            ws.send_json({"type": "result", "results": [{"text": " hello there ", "is_final": True}]})
            first = _receive_until(ws, "segment", seen)
            assert first["index"] == 0
            assert first["segment"]["text"] == "hello there"
            assert first["segment"]["start_time"] == 0.0

            ws.send_json({"type": "result", "results": [{"text": "   ", "is_final": True}]})
            ws.send_json({"type": "result", "results": [{"text": "interim", "is_final": False}]})
            ws.send_json({"type": "end"})
            ws.send_json({"type": "result", "text": "after restart", "is_final": True})
            second = _receive_until(ws, "segment", seen)
            assert second["index"] == 1
            assert second["segment"]["start_time"] == first["segment"]["end_time"]

            ws.send_json({"type": "stop", "save": True, "name": "Live talk", "duration": 3})
            done = _receive_until(ws, "transcript", seen)

        assert [s["text"] for s in done["segments"]] == ["hello there", "after restart"]
        assert done["session_id"] == session["session_id"]
        project = store.get_project(done["project_id"])
        assert project.name == "Live talk"
        assert len(project.transcript) == 2

        starts = [m for m in seen if m.get("type") == "command" and m.get("action") == "start"]
        assert len(starts) >= 1

    def test_unsupported_client_gets_error_and_empty_transcript(self) -> None:
        client = TestClient(app)
        with client.websocket_connect("/ws/live") as ws:
            ws.send_json({"type": "capabilities", "speech_recognition": False})
            ws.send_json({"type": "start"})
            error = _receive_until(ws, "error")
            assert "not supported" in error["error"]

            ws.send_json({"type": "stop", "save": True})
            done = _receive_until(ws, "transcript")

        assert done["segments"] == []
        assert done["project_id"] is None
        assert store.list_projects("default-guest-user") == []
