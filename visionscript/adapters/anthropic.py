"""Anthropic adapter for vision extraction."""

import logging

from visionscript.adapters.base import VisionAdapter

logger = logging.getLogger(__name__)


class AnthropicAdapter(VisionAdapter):
    """Anthropic Claude-based extraction adapter."""

    provider = "anthropic"

    def __init__(self, api_key: str, model: str):
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable is required")
        super().__init__(model)

        from anthropic import AsyncAnthropic

        self.client = AsyncAnthropic(api_key=api_key)
        self.max_tokens = 4096

    async def generate_json(
        self, image_base64: str, mime_type: str, instruction: str, system_instruction: str
    ) -> str:
        """Generate JSON output using Claude's vision capabilities.

        There is no JSON response mode here; the system directive carries the
        output constraint.
        """
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system_instruction,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": mime_type,
                                "data": image_base64,
                            },
                        },
                        {"type": "text", "text": instruction},
                    ],
                }
            ],
        )

        return "".join(block.text for block in message.content if block.type == "text")

    async def is_available(self) -> bool:
        """Check if Anthropic API is available."""
        try:
            await self.client.models.retrieve(self.model)
            return True
        except Exception as e:
            logger.warning(f"Anthropic availability check failed: {e}")
            return False
