"""Google Gemini adapter for vision extraction."""

import logging

from visionscript.adapters.base import VisionAdapter

logger = logging.getLogger(__name__)


class GeminiAdapter(VisionAdapter):
    """Gemini-based extraction adapter using JSON response mode."""

    provider = "gemini"

    def __init__(self, api_key: str, model: str):
        if not api_key:
            raise ValueError("GEMINI_API_KEY (or API_KEY) environment variable is required")
        super().__init__(model)

        from google import genai

        self.client = genai.Client(api_key=api_key)

    async def generate_json(
        self, image_base64: str, mime_type: str, instruction: str, system_instruction: str
    ) -> str:
        """Generate JSON output from an inline image with Gemini."""
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=[
                {
                    "role": "user",
                    "parts": [
                        {"inline_data": {"data": image_base64, "mime_type": mime_type}},
                        {"text": instruction},
                    ],
                }
            ],
            config={
                "system_instruction": system_instruction,
                "response_mime_type": "application/json",
            },
        )
        return response.text

    async def is_available(self) -> bool:
        """Check if the Gemini API is reachable with the configured key."""
        try:
            await self.client.aio.models.get(model=self.model)
            return True
        except Exception as e:
            logger.warning(f"Gemini availability check failed: {e}")
            return False
