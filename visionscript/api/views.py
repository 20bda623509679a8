"""Conversion of session objects into API response models."""

from visionscript.formatting import format_json
from visionscript.exceptions import ResultFormatError
from visionscript.models import ExtractionResult, ImageInfo, ResultView, SessionView
from visionscript.session import ExtractionSession


def result_view(result: ExtractionResult) -> ResultView:
    formatted = None
    format_error = None
    try:
        formatted = format_json(result.json_text)
    except ResultFormatError as e:
        format_error = str(e)
    return ResultView(
        json_text=result.json_text,
        template=result.template,
        timestamp=result.timestamp,
        formatted=formatted,
        format_error=format_error,
    )


def session_view(session: ExtractionSession) -> SessionView:
    image = None
    if session.image is not None:
        image = ImageInfo(
            mime_type=session.image.mime_type,
            filename=session.image.filename,
            size=session.image.size,
        )
    return SessionView(
        session_id=session.session_id,
        state=session.state,
        template=session.template,
        custom_prompt=session.custom_prompt,
        has_image=session.image is not None,
        image=image,
        result=result_view(session.result) if session.result is not None else None,
        error=session.error,
    )
