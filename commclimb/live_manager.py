"""
LiveCaptionManager: one WebSocket = one live-captioning connection.

The browser hosts the speech recognizer; this side owns segmentation. Client messages:
  {"type": "capabilities", "speech_recognition": bool}
  {"type": "start"}
  {"type": "result" | "error" | "end", ...}      recognizer events (see WebSocketRecognizer)
  {"type": "stop", "save": bool, "name": str, "duration": float}
Server messages:
  {"type": "command", "action": "start" | "stop", "lang": str}   drive the recognizer
  {"type": "session", "session_id": str}
  {"type": "segment", "index": int, "segment": {...}}            each committed segment
  {"type": "transcript", "session_id": str, "segments": [...], "project_id": str | null}
  {"type": "error", "error": str}

Events are handled strictly in arrival order by the receive loop; the sender task only
drains recognizer commands. After "stop", late recognizer events are ignored by the
stopped session.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

from fastapi import WebSocket

from commclimb import store
from commclimb.config import get_settings
from commclimb.recognition.base import RecognitionUnsupportedError
from commclimb.recognition.websocket import WebSocketRecognizer
from commclimb.transcript.tracker import Clock, LiveSegmentationTracker

logger = logging.getLogger(__name__)


class LiveCaptionManager:
    def __init__(self, websocket: WebSocket, clock: Clock | None = None) -> None:
        settings = get_settings()
        self._ws = websocket
        self._settings = settings
        self._recognizer = WebSocketRecognizer(lang=settings.RECOGNITION_LANG)
        self._tracker = LiveSegmentationTracker(self._recognizer, clock=clock or time.monotonic)
        self._sender_task: asyncio.Task[Any] | None = None
        self._closed = False

    async def _send_json(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._ws.send_text(json.dumps(payload))
        except Exception:
            self._closed = True

    async def _command_sender(self) -> None:
        """Drain recognizer commands (start/stop) to the client."""
        while True:
            try:
                command = await asyncio.wait_for(self._recognizer.outbox.get(), timeout=1.0)
            except asyncio.TimeoutError:
                if self._closed:
                    break
                continue
            await self._send_json(command)
            if self._closed and self._recognizer.outbox.empty():
                break

    async def _handle_start(self) -> None:
        try:
            session = self._tracker.start()
        except RecognitionUnsupportedError as e:
            await self._send_json({"type": "error", "error": str(e)})
            return
        await self._send_json({"type": "session", "session_id": session.session_id})

    async def _handle_recognizer_event(self, message: dict[str, Any]) -> None:
        before = len(self._tracker.segments)
        self._recognizer.feed(message)
        segments = self._tracker.segments
        for index in range(before, len(segments)):
            await self._send_json(
                {"type": "segment", "index": index, "segment": segments[index].to_dict()}
            )

    async def _handle_stop(self, message: dict[str, Any]) -> None:
        session = self._tracker.session
        segments = self._tracker.stop()
        project_id = None
        if message.get("save") and segments:
            duration = message.get("duration")
            project = store.create_project(
                user_id=self._settings.GUEST_USER_ID,
                name=message.get("name"),
                transcript=segments,
                duration=float(duration) if duration is not None else None,
            )
            project_id = project.id
        await self._send_json(
            {
                "type": "transcript",
                "session_id": session.session_id if session else None,
                "segments": [s.to_dict() for s in segments],
                "project_id": project_id,
            }
        )

    async def handle_message(self, message: dict[str, Any]) -> None:
        msg_type = message.get("type")
        if msg_type == "start":
            await self._handle_start()
        elif msg_type == "stop":
            await self._handle_stop(message)
        elif msg_type in ("capabilities", "result", "error", "end"):
            await self._handle_recognizer_event(message)
        else:
            logger.debug("Ignoring live message type %r", msg_type)

    async def run(self) -> None:
        """Main loop: receive JSON text frames and handle them in order."""
        self._sender_task = asyncio.create_task(self._command_sender())
        try:
            while not self._closed:
                try:
                    msg = await self._ws.receive()
                    if msg.get("type") == "websocket.disconnect":
                        break
                    data = msg.get("text")
                    if data is None:
                        continue
                except Exception:
                    break
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    logger.warning("Live socket sent non-JSON frame; ignored")
                    continue
                if not isinstance(message, dict):
                    continue
                await self.handle_message(message)
        finally:
            if self._tracker.is_listening:
                self._tracker.stop()
            self._closed = True
            if self._sender_task:
                try:
                    await asyncio.wait_for(self._sender_task, timeout=5.0)
                except (asyncio.CancelledError, asyncio.TimeoutError):
                    self._sender_task.cancel()
                    try:
                        await self._sender_task
                    except asyncio.CancelledError:
                        pass
