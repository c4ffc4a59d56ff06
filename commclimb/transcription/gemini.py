"""
GeminiTranscriptionEngine: transcript of a whole recording via google-genai.

Media is sent inline with a prompt asking for logical segments; the response is
constrained to a JSON array of {startTime, endTime, text}.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from google import genai
from google.genai import types as genai_types

from commclimb.config import get_settings
from commclimb.transcript.models import Segment, TranscriptError, transcript_from_payload
from commclimb.transcription.base import TranscriptionEngine, TranscriptionError

logger = logging.getLogger(__name__)

_PROMPT = (
    "Generate a transcript for this video. Break it down into logical segments. "
    "For each segment, provide the start time (in seconds), end time (in seconds), "
    "and the text spoken. Return the result as a JSON array."
)

_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "startTime": {"type": "number", "description": "Start time of the segment in seconds"},
            "endTime": {"type": "number", "description": "End time of the segment in seconds"},
            "text": {"type": "string", "description": "The spoken text"},
        },
        "required": ["startTime", "endTime", "text"],
    },
}


def parse_transcript_response(raw: str | None) -> list[Segment]:
    """Response text -> validated segments. Empty or malformed payload is a TranscriptionError."""
    if not raw or not raw.strip():
        raise TranscriptionError("No response from AI")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TranscriptionError(f"Transcript response is not valid JSON: {e}") from e
    try:
        return transcript_from_payload(payload)
    except TranscriptError as e:
        raise TranscriptionError(str(e)) from e


class GeminiTranscriptionEngine(TranscriptionEngine):
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = (api_key if api_key is not None else settings.GEMINI_API_KEY).strip()
        self._model = model or settings.GEMINI_MODEL
        self._timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.TRANSCRIPTION_TIMEOUT_SECONDS
        )

    @property
    def name(self) -> str:
        return "gemini"

    def _transcribe_sync(self, media: bytes, mime_type: str) -> list[Segment]:
        if not self._api_key:
            raise TranscriptionError("GEMINI_API_KEY not configured")
        client = genai.Client(
            api_key=self._api_key,
            http_options=genai_types.HttpOptions(timeout=int(self._timeout_seconds * 1000)),
        )
        try:
            response = client.models.generate_content(
                model=self._model,
                contents=[
                    genai_types.Part.from_bytes(data=media, mime_type=mime_type),
                    _PROMPT,
                ],
                config=genai_types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=_RESPONSE_SCHEMA,
                ),
            )
        except Exception as e:
            logger.exception("Gemini transcription request failed")
            raise TranscriptionError(f"Gemini request failed ({type(e).__name__}: {e})") from e
        segments = parse_transcript_response(getattr(response, "text", None))
        logger.info("Gemini transcript: %d segments (model=%s)", len(segments), self._model)
        return segments

    async def transcribe(self, media: bytes, mime_type: str) -> list[Segment]:
        """Run _transcribe_sync in executor so event loop is not blocked."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._transcribe_sync, media, mime_type)
