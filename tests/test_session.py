"""Tests for the extraction session state machine."""
import asyncio
from unittest.mock import patch

import pytest

from visionscript.exceptions import (
    GENERIC_FAILURE_MESSAGE,
    ExtractionError,
    ExtractionInProgressError,
    MissingImageError,
    SessionNotFoundError,
)
from visionscript.models import ImagePayload, SessionState
from visionscript.session import ExtractionSession, SessionStore
from visionscript.templates import ExtractionTemplate


@pytest.fixture
def image(png_bytes):
    return ImagePayload.from_bytes(png_bytes, "image/png", filename="photo.png")


@pytest.fixture
def session(client):
    return ExtractionSession(client)


def test_new_session_defaults(session):
    assert session.state == SessionState.IDLE
    assert session.template is ExtractionTemplate.GENERAL
    assert session.image is None
    assert session.result is None
    assert session.error is None


@pytest.mark.asyncio
async def test_extract_without_image_sends_nothing(session, fake_adapter):
    """No image: rejected locally, no outbound call, state untouched."""
    session.error = "previous error"

    with pytest.raises(MissingImageError):
        await session.extract()

    fake_adapter.generate.assert_not_awaited()
    assert session.error == "previous error"
    assert session.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_extract_success(session, fake_adapter, image):
    """A successful call stores the result and moves to SUCCEEDED."""
    fake_adapter.generate.return_value = '  {"a":1}\n'
    session.select_image(image)
    session.set_template(ExtractionTemplate.PRODUCT)

    result = await session.extract()

    assert result.json_text == '{"a":1}'
    assert result.template is ExtractionTemplate.PRODUCT
    assert session.result is result
    assert session.state == SessionState.SUCCEEDED
    assert fake_adapter.generate.call_args[0][:2] == (image.data, "image/png")


@pytest.mark.asyncio
async def test_extract_failure_keeps_image_and_template(session, fake_adapter, image):
    """Failures store the generic message and keep inputs for a retry."""
    fake_adapter.generate.side_effect = ConnectionError("network down")
    session.select_image(image)
    session.set_template(ExtractionTemplate.INVOICE)

    with pytest.raises(ExtractionError) as exc_info:
        await session.extract()

    assert str(exc_info.value) == GENERIC_FAILURE_MESSAGE
    assert session.error == GENERIC_FAILURE_MESSAGE
    assert "network down" not in session.error
    assert session.state == SessionState.FAILED
    assert session.image is image
    assert session.template is ExtractionTemplate.INVOICE

    # Retry from FAILED without re-uploading
    fake_adapter.generate.side_effect = None
    fake_adapter.generate.return_value = '{"total": 9.99}'
    await session.extract()
    assert session.state == SessionState.SUCCEEDED
    assert session.error is None


@pytest.mark.asyncio
async def test_custom_prompt_only_sent_for_custom_template(session, fake_adapter, image):
    session.select_image(image)
    session.set_template(ExtractionTemplate.CUSTOM, "Count the apples")
    await session.extract()
    assert fake_adapter.generate.call_args[0][2] == "Count the apples"

    session.set_template(ExtractionTemplate.GENERAL)
    await session.extract()
    assert fake_adapter.generate.call_args[0][2] != "Count the apples"
    assert session.custom_prompt == "Count the apples"


@pytest.mark.asyncio
async def test_new_image_clears_previous_outcome(session, image, png_bytes):
    """Selecting a new image clears result and error."""
    session.select_image(image)
    await session.extract()
    assert session.result is not None

    session.error = "stale"
    session.select_image(ImagePayload.from_bytes(png_bytes + b"\x01", "image/png"))

    assert session.result is None
    assert session.error is None
    assert session.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_clear_drops_everything(session, image):
    session.select_image(image)
    await session.extract()

    session.clear()

    assert session.image is None
    assert session.result is None
    assert session.state == SessionState.IDLE
    with pytest.raises(MissingImageError):
        await session.extract()


@pytest.mark.asyncio
async def test_second_request_rejected_while_requesting(session, fake_adapter, image):
    """The REQUESTING state gates re-submission."""
    release = asyncio.Event()

    async def slow(*args):
        await release.wait()
        return '{"done": true}'

    fake_adapter.generate.side_effect = slow
    session.select_image(image)

    first = asyncio.create_task(session.extract())
    await asyncio.sleep(0)
    assert session.state == SessionState.REQUESTING

    with pytest.raises(ExtractionInProgressError):
        await session.extract()

    release.set()
    await first
    assert session.state == SessionState.SUCCEEDED
    assert fake_adapter.generate.await_count == 1


@pytest.mark.asyncio
async def test_result_for_replaced_image_is_discarded(session, fake_adapter, image, png_bytes):
    """A response arriving after the image changed is not shown."""
    release = asyncio.Event()

    async def slow(*args):
        await release.wait()
        return '{"old": true}'

    fake_adapter.generate.side_effect = slow
    session.select_image(image)
    first = asyncio.create_task(session.extract())
    await asyncio.sleep(0)

    session.select_image(ImagePayload.from_bytes(png_bytes + b"\x02", "image/png"))
    assert session.state == SessionState.REQUESTING

    release.set()
    assert await first is None

    assert session.result is None
    assert session.state == SessionState.IDLE


def test_store_lifecycle(client):
    store = SessionStore(client)
    session = store.create()

    assert store.get(session.session_id) is session
    assert len(store) == 1

    store.delete(session.session_id)
    with pytest.raises(SessionNotFoundError):
        store.get(session.session_id)
    with pytest.raises(SessionNotFoundError):
        store.delete(session.session_id)


@pytest.mark.asyncio
async def test_failure_for_replaced_image_is_discarded(session, fake_adapter, image, png_bytes):
    """A failure arriving after the image changed is dropped like a stale result."""
    release = asyncio.Event()

    async def slow_failure(*args):
        await release.wait()
        raise ConnectionError("network down")

    fake_adapter.generate.side_effect = slow_failure
    session.select_image(image)
    first = asyncio.create_task(session.extract())
    await asyncio.sleep(0)

    session.select_image(ImagePayload.from_bytes(png_bytes + b"\x03", "image/png"))
    release.set()

    assert await first is None
    assert session.error is None
    assert session.state == SessionState.IDLE


def test_store_evicts_least_recently_used(client):
    """The store never holds more than max_sessions sessions."""
    store = SessionStore(client, max_sessions=3)
    first = store.create()
    second = store.create()
    store.create()

    store.get(first.session_id)
    for _ in range(10):
        store.create()

    assert len(store) == 3
    with pytest.raises(SessionNotFoundError):
        store.get(second.session_id)


def test_store_evicts_idle_sessions(client):
    """Sessions untouched for longer than idle_seconds are dropped."""
    store = SessionStore(client, idle_seconds=60)
    with patch("visionscript.session.time.monotonic", return_value=1000.0):
        old = store.create()
    with patch("visionscript.session.time.monotonic", return_value=1030.0):
        recent = store.create()

    with patch("visionscript.session.time.monotonic", return_value=1070.0):
        assert store.get(recent.session_id) is recent
        with pytest.raises(SessionNotFoundError):
            store.get(old.session_id)

    assert len(store) == 1


def test_store_keeps_busy_sessions_past_idle_limit(client):
    """A session with an outstanding request is not evicted for idleness."""
    store = SessionStore(client, idle_seconds=60)
    with patch("visionscript.session.time.monotonic", return_value=1000.0):
        busy = store.create()
    busy.state = SessionState.REQUESTING

    with patch("visionscript.session.time.monotonic", return_value=2000.0):
        assert store.get(busy.session_id) is busy
