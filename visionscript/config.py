import os
from dataclasses import dataclass, field

EXTRACTOR_PROVIDER = os.environ.get("EXTRACTOR_PROVIDER", "gemini")
EXTRACTOR_MODEL_VISION = os.environ.get("EXTRACTOR_MODEL_VISION", "")

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "") or os.environ.get("API_KEY", "")
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")
OLLAMA_URL = os.environ.get("OLLAMA_URL", "http://localhost:11434")

API_NAME = os.environ.get("API_NAME", "VisionScript")
API_VERSION = os.environ.get("API_VERSION", "1.0.0")
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Upload filter; the front-end advertises "PNG, JPG up to 10MB"
MAX_IMAGE_BYTES = int(os.environ.get("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))

# Sessions hold their image in memory; bound how many and for how long
MAX_SESSIONS = int(os.environ.get("MAX_SESSIONS", "100"))
SESSION_IDLE_SECONDS = float(os.environ.get("SESSION_IDLE_SECONDS", "1800"))

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ALLOW_ORIGINS", "").split(",")
    if origin.strip()
]

DEFAULT_MODELS = {
    "gemini": "gemini-3-flash-preview",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-5",
    "ollama": "llava",
}


def api_key_for(provider: str) -> str:
    """Return the configured credential for a provider ("" when unset or not needed)."""
    return {
        "gemini": GEMINI_API_KEY,
        "openai": OPENAI_API_KEY,
        "anthropic": ANTHROPIC_API_KEY,
    }.get(provider, "")


def model_for(provider: str) -> str:
    return EXTRACTOR_MODEL_VISION or DEFAULT_MODELS.get(provider, "")


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment handed to the app factory."""

    api_name: str = API_NAME
    api_version: str = API_VERSION
    provider: str = EXTRACTOR_PROVIDER
    max_image_bytes: int = MAX_IMAGE_BYTES
    max_sessions: int = MAX_SESSIONS
    session_idle_seconds: float = SESSION_IDLE_SECONDS
    cors_allow_origins: list[str] = field(default_factory=lambda: list(CORS_ALLOW_ORIGINS))
