"""VisionScript: image to structured JSON through a multimodal model."""

from visionscript.client import ExtractionClient, create_client
from visionscript.exceptions import ExtractionError
from visionscript.templates import ExtractionTemplate, resolve_instruction

__all__ = [
    "ExtractionClient",
    "ExtractionError",
    "ExtractionTemplate",
    "create_client",
    "resolve_instruction",
]
