"""Data model for images, results and the API views."""

import base64
import binascii
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from visionscript.templates import ExtractionTemplate


class SessionState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ImagePayload(BaseModel):
    """An uploaded image held in memory for one session."""

    data: str  # base64 of the raw file bytes
    mime_type: str
    filename: str = ""

    @field_validator("mime_type")
    @classmethod
    def _check_mime_type(cls, value: str) -> str:
        value = value.strip().lower()
        if not value.startswith("image/"):
            raise ValueError(f"Not an image media type: {value!r}")
        return value

    @field_validator("data")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Image data is not valid base64: {e}") from e
        return value

    @classmethod
    def from_bytes(cls, content: bytes, mime_type: str, filename: str = "") -> "ImagePayload":
        return cls(
            data=base64.b64encode(content).decode("ascii"),
            mime_type=mime_type,
            filename=filename,
        )

    @property
    def size(self) -> int:
        """Decoded size in bytes."""
        padding = self.data.count("=", -2)
        return len(self.data) * 3 // 4 - padding


class ExtractionResult(BaseModel):
    """Result of one successful extraction call."""

    model_config = ConfigDict(populate_by_name=True)

    json_text: str = Field(alias="json")
    template: ExtractionTemplate
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# --- API models ---


class TemplateInfo(BaseModel):
    name: str
    label: str
    instruction: str


class TemplateSelection(BaseModel):
    template: str
    custom_prompt: Optional[str] = None


class ImageInfo(BaseModel):
    mime_type: str
    filename: str = ""
    size: int


class ResultView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    json_text: str = Field(alias="json")
    template: ExtractionTemplate
    timestamp: datetime
    formatted: Optional[str] = None
    format_error: Optional[str] = None


class SessionView(BaseModel):
    session_id: str
    state: SessionState
    template: ExtractionTemplate
    custom_prompt: str = ""
    has_image: bool
    image: Optional[ImageInfo] = None
    result: Optional[ResultView] = None
    error: Optional[str] = None
