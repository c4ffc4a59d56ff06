"""
Remote transcription: swappable engines that return a whole transcript at once.

- gemini: google-genai, JSON array of segments.
- cloudflare: Workers AI whisper.
"""
from __future__ import annotations

from commclimb.config import get_settings
from commclimb.transcription.base import TranscriptionEngine, TranscriptionError
from commclimb.transcription.cloudflare import CloudflareWhisperEngine
from commclimb.transcription.gemini import GeminiTranscriptionEngine


def get_transcription_engine() -> TranscriptionEngine:
    """Return engine from config (TRANSCRIPTION_BACKEND)."""
    settings = get_settings()
    if settings.TRANSCRIPTION_BACKEND == "cloudflare":
        return CloudflareWhisperEngine()
    return GeminiTranscriptionEngine()


__all__ = [
    "CloudflareWhisperEngine",
    "GeminiTranscriptionEngine",
    "TranscriptionEngine",
    "TranscriptionError",
    "get_transcription_engine",
]
