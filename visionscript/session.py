"""Per-user extraction session.

The session owns the selected image, the template choice and the latest
outcome. Its state machine gates submission: a new extraction is accepted
from IDLE, SUCCEEDED or FAILED, never while REQUESTING.
"""

import logging
import time
import uuid
from collections import OrderedDict

from visionscript.client import ExtractionClient
from visionscript.exceptions import (
    ExtractionError,
    ExtractionInProgressError,
    MissingImageError,
    SessionNotFoundError,
)
from visionscript.models import ExtractionResult, ImagePayload, SessionState
from visionscript.templates import ExtractionTemplate

logger = logging.getLogger(__name__)


class ExtractionSession:
    def __init__(self, client: ExtractionClient, session_id: str | None = None):
        self.client = client
        self.session_id = session_id or uuid.uuid4().hex
        self.image: ImagePayload | None = None
        self.template = ExtractionTemplate.GENERAL
        self.custom_prompt = ""
        self.result: ExtractionResult | None = None
        self.error: str | None = None
        self.state = SessionState.IDLE
        # Bumped whenever the image changes so stale responses can be dropped
        self._generation = 0

    @property
    def is_busy(self) -> bool:
        return self.state == SessionState.REQUESTING

    def select_image(self, image: ImagePayload) -> None:
        """Replace the image and clear the previous outcome."""
        self.image = image
        self._reset_outcome()
        logger.info(
            f"Session {self.session_id}: image selected "
            f"({image.mime_type}, {image.size} bytes)"
        )

    def clear(self) -> None:
        """Drop the image together with any result or error."""
        self.image = None
        self._reset_outcome()
        logger.info(f"Session {self.session_id}: cleared")

    def set_template(
        self, template: ExtractionTemplate, custom_prompt: str | None = None
    ) -> None:
        self.template = template
        if custom_prompt is not None:
            self.custom_prompt = custom_prompt

    async def extract(self) -> ExtractionResult | None:
        """Run one extraction for the current image and template.

        Returns:
            The new result, or None when the image was replaced or cleared
            while the request was outstanding (the outcome is dropped)

        Raises:
            MissingImageError: No image selected; nothing is sent
            ExtractionInProgressError: A request is already outstanding
            ExtractionError: The remote call failed; image and template are kept
        """
        if self.image is None:
            raise MissingImageError()
        if self.is_busy:
            raise ExtractionInProgressError()

        image = self.image
        template = self.template
        custom_prompt = self.custom_prompt if template == ExtractionTemplate.CUSTOM else None
        generation = self._generation

        self.state = SessionState.REQUESTING
        self.error = None
        try:
            text = await self.client.analyze_image_to_json(
                image.data, image.mime_type, template, custom_prompt
            )
        except ExtractionError as e:
            if self._is_stale(generation):
                logger.info(f"Session {self.session_id}: discarding failure for replaced image")
                self.state = SessionState.IDLE
                return None
            self.error = str(e)
            self.state = SessionState.FAILED
            raise
        except BaseException:
            # Cancelled or unexpected: nothing to show, allow a new request
            self.state = SessionState.IDLE
            raise

        if self._is_stale(generation):
            logger.info(f"Session {self.session_id}: discarding result for replaced image")
            self.state = SessionState.IDLE
            return None

        self.result = ExtractionResult(json_text=text, template=template)
        self.state = SessionState.SUCCEEDED
        return self.result

        self.result = result
        self.state = SessionState.SUCCEEDED
        return result

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _reset_outcome(self) -> None:
        self.result = None
        self.error = None
        # An outstanding request keeps the session busy until it returns
        if self.state != SessionState.REQUESTING:
            self.state = SessionState.IDLE
        self._generation += 1


class SessionStore:
    """In-memory session registry. Nothing is persisted.

    Sessions idle for longer than ``idle_seconds`` are evicted, and the
    least recently used ones go first once ``max_sessions`` is reached.
    """

    def __init__(
        self, client: ExtractionClient, max_sessions: int = 100, idle_seconds: float = 1800.0
    ):
        self.client = client
        self.max_sessions = max_sessions
        self.idle_seconds = idle_seconds
        # Ordered by last use, oldest first
        self._sessions: OrderedDict[str, ExtractionSession] = OrderedDict()
        self._last_used: dict[str, float] = {}

    def create(self) -> ExtractionSession:
        self._evict_idle()
        while len(self._sessions) >= self.max_sessions:
            oldest, _ = self._sessions.popitem(last=False)
            self._last_used.pop(oldest, None)
            logger.info(f"Session {oldest} evicted (limit {self.max_sessions})")

        session = ExtractionSession(self.client)
        self._sessions[session.session_id] = session
        self._last_used[session.session_id] = time.monotonic()
        logger.info(f"Session {session.session_id} created")
        return session

    def get(self, session_id: str) -> ExtractionSession:
        self._evict_idle()
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._sessions.move_to_end(session_id)
        self._last_used[session_id] = time.monotonic()
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        self._last_used.pop(session_id, None)
        logger.info(f"Session {session_id} deleted")

    def _evict_idle(self) -> None:
        cutoff = time.monotonic() - self.idle_seconds
        for session_id, session in list(self._sessions.items()):
            if self._last_used[session_id] > cutoff:
                break
            if session.is_busy:
                continue
            del self._sessions[session_id]
            del self._last_used[session_id]
            logger.info(f"Session {session_id} evicted after {self.idle_seconds:.0f}s idle")

    def __len__(self) -> int:
        return len(self._sessions)
