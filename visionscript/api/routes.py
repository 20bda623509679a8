import logging
from time import perf_counter

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import PlainTextResponse

from visionscript.api.deps import get_session, get_settings, get_store
from visionscript.api.views import session_view
from visionscript.config import Settings
from visionscript.exceptions import (
    ExtractionError,
    ExtractionInProgressError,
    MissingImageError,
    UnknownTemplateError,
)
from visionscript.models import ImagePayload, SessionView, TemplateInfo, TemplateSelection
from visionscript.session import ExtractionSession, SessionStore
from visionscript.templates import get_template, list_templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["extraction"])


@router.get("/templates", response_model=list[TemplateInfo])
def templates() -> list[TemplateInfo]:
    return [
        TemplateInfo(name=template.name, label=template.value, instruction=instruction)
        for template, instruction in list_templates()
    ]


@router.post("/sessions", response_model=SessionView, status_code=status.HTTP_201_CREATED)
def create_session(store: SessionStore = Depends(get_store)) -> SessionView:
    return session_view(store.create())


@router.get("/sessions/{session_id}", response_model=SessionView)
def read_session(session: ExtractionSession = Depends(get_session)) -> SessionView:
    return session_view(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, store: SessionStore = Depends(get_store)) -> Response:
    store.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/sessions/{session_id}/image", response_model=SessionView)
async def upload_image(
    image: UploadFile = File(...),
    session: ExtractionSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> SessionView:
    content_type = (image.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported media type: {image.content_type}",
        )

    content = await image.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image is empty.")
    if len(content) > settings.max_image_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image exceeds max size of {settings.max_image_bytes} bytes.",
        )

    session.select_image(
        ImagePayload.from_bytes(content, content_type, filename=image.filename or "")
    )
    return session_view(session)


@router.delete("/sessions/{session_id}/image", response_model=SessionView)
def clear_image(session: ExtractionSession = Depends(get_session)) -> SessionView:
    session.clear()
    return session_view(session)


@router.put("/sessions/{session_id}/template", response_model=SessionView)
def select_template(
    selection: TemplateSelection, session: ExtractionSession = Depends(get_session)
) -> SessionView:
    try:
        template = get_template(selection.template)
    except UnknownTemplateError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    session.set_template(template, selection.custom_prompt)
    return session_view(session)


@router.post("/sessions/{session_id}/extract", response_model=SessionView)
async def extract(session: ExtractionSession = Depends(get_session)) -> SessionView:
    started_at = perf_counter()
    try:
        await session.extract()
    except MissingImageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ExtractionInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ExtractionError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from None

    logger.info(
        "Extract request finished session_id=%s template=%s total_ms=%s",
        session.session_id,
        session.template.name,
        round((perf_counter() - started_at) * 1000, 1),
    )
    return session_view(session)


@router.get("/sessions/{session_id}/result/raw", response_class=PlainTextResponse)
def raw_result(session: ExtractionSession = Depends(get_session)) -> PlainTextResponse:
    """Raw model text, verbatim, for copy-to-clipboard."""
    if session.result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No result available.")
    return PlainTextResponse(session.result.json_text)
