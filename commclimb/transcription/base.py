"""
TranscriptionEngine: abstract interface for whole-recording remote transcription.

Implementations: GeminiTranscriptionEngine (google-genai), CloudflareWhisperEngine (httpx).
The call is opaque: media bytes + mime type in, ordered list[Segment] out. A missing or
unusable response is a TranscriptionError; engines never retry.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from commclimb.transcript.models import Segment


class TranscriptionError(RuntimeError):
    """Remote transcription failed or returned no usable transcript."""


class TranscriptionEngine(ABC):
    """transcribe() is async; blocking SDK/HTTP work runs in an executor."""

    @abstractmethod
    async def transcribe(self, media: bytes, mime_type: str) -> list[Segment]:
        """Transcribe a full recording into ordered, validated segments."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        ...
