"""Exception hierarchy shared by the client, the session and the HTTP layer."""

GENERIC_FAILURE_MESSAGE = (
    "Failed to process image. Please ensure the image is clear and try again."
)


class VisionScriptError(Exception):
    """Base class for all VisionScript errors."""


class MissingImageError(VisionScriptError):
    """Extraction was requested before an image was selected."""

    def __init__(self, message: str = "Select an image before running an extraction."):
        super().__init__(message)


class ExtractionInProgressError(VisionScriptError):
    """A request is already outstanding for this session."""

    def __init__(self, message: str = "An extraction is already in progress."):
        super().__init__(message)


class ExtractionError(VisionScriptError):
    """The inference call failed. Carries only the user-facing message."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


class ResultFormatError(VisionScriptError):
    """Returned text could not be parsed as JSON."""


class SessionNotFoundError(VisionScriptError, KeyError):
    def __str__(self) -> str:
        return f"Session not found: {self.args[0]}" if self.args else "Session not found"


class UnknownTemplateError(VisionScriptError, ValueError):
    pass
