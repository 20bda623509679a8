import logging
import time
from pathlib import Path

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from visionscript.api.routes import router
from visionscript.client import ExtractionClient, create_client
from visionscript.config import Settings
from visionscript.exceptions import SessionNotFoundError
from visionscript.session import SessionStore

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        t0 = time.time()
        response = await call_next(request)
        dt = int((time.time() - t0) * 1000)
        logger.info(f"[res] {request.method} {request.url.path} -> {response.status_code} {dt}ms")
        return response


def create_app(
    settings: Settings | None = None, client: ExtractionClient | None = None
) -> FastAPI:
    """Build the API app.

    Args:
        settings: Settings snapshot (defaults to the environment)
        client: Extraction client; built from the configured provider when omitted

    Returns:
        FastAPI application
    """
    settings = settings or Settings()
    client = client or create_client(provider=settings.provider)

    app = FastAPI(
        title=settings.api_name,
        version=settings.api_version,
        description="Upload an image, pick an extraction template, get structured JSON back.",
    )
    app.state.settings = settings
    app.state.store = SessionStore(
        client,
        max_sessions=settings.max_sessions,
        idle_seconds=settings.session_idle_seconds,
    )

    app.add_middleware(AccessLogMiddleware)
    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html", media_type="text/html")

    @app.get("/health", tags=["meta"])
    async def health() -> dict[str, str | bool]:
        return {
            "status": "ok",
            "service": settings.api_name,
            "version": settings.api_version,
            "provider": client.adapter.provider,
            "provider_available": await client.adapter.is_available(),
        }

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(_: Request, exc: SessionNotFoundError):  # type: ignore[no-untyped-def]
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):  # type: ignore[no-untyped-def]
        logger.exception("Unhandled error", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "detail": "Unexpected server error.",
                "type": exc.__class__.__name__,
            },
        )

    app.include_router(router)
    logger.info(f"{settings.api_name} {settings.api_version} ready (provider={client.adapter.provider})")
    return app
