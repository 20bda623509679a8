from fastapi import Request

from visionscript.config import Settings
from visionscript.session import ExtractionSession, SessionStore


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(session_id: str, request: Request) -> ExtractionSession:
    """Resolve the path's session id; unknown ids surface as 404 via the app handler."""
    return get_store(request).get(session_id)
