"""Shared fixtures."""
import base64
from unittest.mock import AsyncMock

import pytest

from visionscript.adapters.base import VisionAdapter
from visionscript.client import ExtractionClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


class FakeAdapter(VisionAdapter):
    """Adapter double recording calls through an AsyncMock."""

    provider = "fake"

    def __init__(self, text='{"a":1}'):
        super().__init__("fake-model")
        self.generate = AsyncMock(return_value=text)

    async def generate_json(self, image_base64, mime_type, instruction, system_instruction):
        return await self.generate(image_base64, mime_type, instruction, system_instruction)

    async def is_available(self):
        return True


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def png_base64():
    return base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def client(fake_adapter):
    return ExtractionClient(fake_adapter)
