"""
WebSocketRecognizer: the client's speech recognizer, driven over a WebSocket.

The browser runs continuous recognition and forwards its events as JSON:
  {"type": "capabilities", "speech_recognition": bool}
  {"type": "result", "results": [{"text": str, "is_final": bool}, ...]}
  {"type": "error", "error": str}
  {"type": "end"}
Commands travel the other way through an outbound queue, drained by the connection's
sender task:
  {"type": "command", "action": "start" | "stop", "lang": str}
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from commclimb.recognition.base import RecognitionResult, Recognizer, RecognizerError

logger = logging.getLogger(__name__)


def _parse_results(message: dict[str, Any]) -> list[RecognitionResult]:
    """Results batch from a client "result" message; a single {text, is_final} is a batch of one."""
    raw = message.get("results")
    if raw is None:
        raw = [message]
    results: list[RecognitionResult] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        results.append(
            RecognitionResult(
                text=str(item.get("text") or ""),
                is_final=bool(item.get("is_final", item.get("isFinal", True))),
            )
        )
    return results


class WebSocketRecognizer(Recognizer):
    """
    Remote recognizer. start()/stop() only enqueue a command (non-blocking);
    feed() dispatches client events to the bound callbacks in arrival order.
    """

    def __init__(self, lang: str = "en-US", supported: bool = True) -> None:
        super().__init__()
        self._lang = lang
        self._supported = supported
        self._running = False
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def _send_command(self, action: str) -> None:
        try:
            self.outbox.put_nowait({"type": "command", "action": action, "lang": self._lang})
        except asyncio.QueueFull:
            logger.warning("Recognizer command queue full, dropping %s", action)

    def start(self) -> None:
        if not self._supported:
            raise RecognizerError("speech recognition not available on client")
        if self._running:
            raise RecognizerError("already running")
        self._running = True
        self._send_command("start")

    def stop(self) -> None:
        self._running = False
        self._send_command("stop")

    @property
    def is_supported(self) -> bool:
        return self._supported

    @property
    def running(self) -> bool:
        return self._running

    def feed(self, message: dict[str, Any]) -> bool:
        """Handle one client event. Returns False for message types this recognizer does not own."""
        msg_type = message.get("type")
        if msg_type == "capabilities":
            self._supported = bool(message.get("speech_recognition", False))
            return True
        if msg_type == "result":
            self.emit_results(_parse_results(message))
            return True
        if msg_type == "error":
            self.emit_error(str(message.get("error") or "unknown"))
            return True
        if msg_type == "end":
            # Host recognizer has stopped; a restart must be allowed
            self._running = False
            self.emit_end()
            return True
        return False
