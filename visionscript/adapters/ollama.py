"""Ollama adapter for vision extraction."""

import logging

import httpx

from visionscript.adapters.base import VisionAdapter

logger = logging.getLogger(__name__)


class OllamaAdapter(VisionAdapter):
    """Ollama-based extraction adapter for locally served vision models."""

    provider = "ollama"

    def __init__(self, base_url: str, model: str, timeout: float = 60.0):
        super().__init__(model)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def generate_json(
        self, image_base64: str, mime_type: str, instruction: str, system_instruction: str
    ) -> str:
        """Generate JSON output from Ollama's vision model.

        Ollama takes bare base64 images and infers the format itself, so the
        media type is not sent.
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model,
                    "prompt": instruction,
                    "system": system_instruction,
                    "images": [image_base64],
                    "stream": False,
                    "format": "json",
                },
            )
            response.raise_for_status()
            result = response.json()

        return result.get("response")

    async def is_available(self) -> bool:
        """Check if Ollama is reachable."""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(f"{self.base_url}/api/tags")
                return response.status_code == 200
        except Exception as e:
            logger.warning(f"Ollama availability check failed: {e}")
            return False
