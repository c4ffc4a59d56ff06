"""Recognition: host speech-recognizer capability behind a small interface."""
from .base import (
    RecognitionResult,
    RecognitionUnsupportedError,
    Recognizer,
    RecognizerError,
)
from .websocket import WebSocketRecognizer

__all__ = [
    "RecognitionResult",
    "RecognitionUnsupportedError",
    "Recognizer",
    "RecognizerError",
    "WebSocketRecognizer",
]
