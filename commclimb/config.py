"""Application configuration. Loads from env vars."""
import logging
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Remote transcription backend: "gemini" | "cloudflare"
    TRANSCRIPTION_BACKEND: Literal["gemini", "cloudflare"] = "gemini"
    TRANSCRIPTION_TIMEOUT_SECONDS: float = 120.0

    # Gemini (google-genai): whole-recording transcript as a JSON array of segments
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Cloudflare Workers AI Whisper (when TRANSCRIPTION_BACKEND=cloudflare)
    CLOUDFLARE_ACCOUNT_ID: str = ""
    CLOUDFLARE_API_TOKEN: str = ""
    CLOUDFLARE_WHISPER_MODEL: str = "@cf/openai/whisper"

    # Live captioning: language hint sent to the client-side recognizer
    RECOGNITION_LANG: str = "en-US"

    # Projects belong to a single guest user (no accounts)
    GUEST_USER_ID: str = "default-guest-user"

    # Upper bound for POST /api/projects/{id}/transcribe bodies
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path = also log to file (empty = console only).
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply LOG_LEVEL and optional LOG_FILE to the root logger. Called once at startup."""
    settings = settings or get_settings()
    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
