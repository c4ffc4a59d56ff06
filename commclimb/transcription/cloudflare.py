"""
CloudflareWhisperEngine: Whisper via Cloudflare Workers AI.

Sends the recording bytes to the Workers AI whisper model and maps its timing output to
segments: "segments" when the model returns them, else all "words" folded into one
segment. A response without timing information is not a usable transcript.
Runs HTTP call in executor to avoid blocking event loop.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from commclimb.config import get_settings
from commclimb.transcript.models import Segment, TranscriptError, validate_transcript
from commclimb.transcription.base import TranscriptionEngine, TranscriptionError

logger = logging.getLogger(__name__)


def _seconds(item: dict[str, Any], key: str) -> float:
    try:
        return float(item.get(key, 0.0))
    except (TypeError, ValueError) as e:
        raise TranscriptionError(f"Cloudflare {key} time is not numeric: {item.get(key)!r}") from e


def _segments_from_result(result: Any) -> list[Segment]:
    if not isinstance(result, dict):
        raise TranscriptionError("Cloudflare response has no result object")

    raw_segments = result.get("segments")
    if isinstance(raw_segments, list) and raw_segments:
        segments = [
            Segment(
                start_time=_seconds(s, "start"),
                end_time=_seconds(s, "end"),
                text=(s.get("text") or "").strip(),
            )
            for s in raw_segments
            if isinstance(s, dict) and (s.get("text") or "").strip()
        ]
    else:
        words = [w for w in result.get("words") or [] if isinstance(w, dict)]
        if not words:
            raise TranscriptionError("Cloudflare response has no timed segments or words")
        text = " ".join((w.get("word") or "").strip() for w in words).strip()
        segments = [
            Segment(
                start_time=_seconds(words[0], "start"),
                end_time=_seconds(words[-1], "end"),
                text=text,
            )
        ]
    if not segments:
        raise TranscriptionError("Cloudflare transcript is empty")
    try:
        return validate_transcript(segments)
    except TranscriptError as e:
        raise TranscriptionError(str(e)) from e


def _sync_transcribe_cloudflare(
    media: bytes,
    account_id: str,
    token: str,
    model: str,
    timeout: float,
) -> list[Segment]:
    """Blocking HTTP call; run in executor."""
    if not account_id or not token:
        raise TranscriptionError("CLOUDFLARE_ACCOUNT_ID / CLOUDFLARE_API_TOKEN not configured")

    url = f"https://api.cloudflare.com/client/v4/accounts/{account_id}/ai/run/{model}"
    headers = {"Authorization": f"Bearer {token}"}
    body = {"audio": list(media)}

    try:
        with httpx.Client(timeout=timeout) as client:
            resp = client.post(url, headers=headers, json=body)
    except httpx.HTTPError as e:
        raise TranscriptionError(f"Cloudflare request failed: {e}") from e
    if resp.status_code != 200:
        logger.warning("Cloudflare transcription returned %s: %s", resp.status_code, resp.text[:200])
        raise TranscriptionError(f"Cloudflare returned HTTP {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as e:
        raise TranscriptionError("Cloudflare response is not JSON") from e
    result = data.get("result", data) if isinstance(data, dict) else None
    return _segments_from_result(result)


class CloudflareWhisperEngine(TranscriptionEngine):
    """Remote Whisper via Cloudflare Workers AI; one request per recording."""

    def __init__(
        self,
        account_id: str | None = None,
        token: str | None = None,
        model: str | None = None,
    ) -> None:
        settings = get_settings()
        self._account_id = account_id if account_id is not None else settings.CLOUDFLARE_ACCOUNT_ID
        self._token = token if token is not None else settings.CLOUDFLARE_API_TOKEN
        self._model = model or settings.CLOUDFLARE_WHISPER_MODEL
        self._timeout = settings.TRANSCRIPTION_TIMEOUT_SECONDS

    @property
    def name(self) -> str:
        return "cloudflare"

    async def transcribe(self, media: bytes, mime_type: str) -> list[Segment]:
        """mime_type is not needed by Workers AI whisper; the model sniffs the container."""
        loop = asyncio.get_event_loop()
        segments = await loop.run_in_executor(
            None,
            _sync_transcribe_cloudflare,
            media,
            self._account_id,
            self._token,
            self._model,
            self._timeout,
        )
        logger.info("Cloudflare transcript: %d segments (%s)", len(segments), mime_type)
        return segments
