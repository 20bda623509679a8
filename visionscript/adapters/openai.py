"""OpenAI adapter for vision extraction."""
import logging
from visionscript.adapters.base import VisionAdapter

logger = logging.getLogger(__name__)


class OpenAIAdapter(VisionAdapter):
    """OpenAI GPT-based extraction adapter."""

    provider = "openai"

    def __init__(self, api_key: str, model: str):
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")
        super().__init__(model)

        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=api_key)
        self.max_tokens = 4096

    async def generate_json(
        self, image_base64: str, mime_type: str, instruction: str, system_instruction: str
    ) -> str:
        """Generate JSON output using OpenAI's JSON mode."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{
                "role": "system",
                "content": system_instruction
            }, {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": instruction
                    },
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{mime_type};base64,{image_base64}"
                        }
                    }
                ]
            }],
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"}
        )
        return response.choices[0].message.content

    async def is_available(self) -> bool:
        """Check if OpenAI API is available."""
        try:
            await self.client.models.retrieve(self.model)
            return True
        except Exception as e:
            logger.warning(f"OpenAI availability check failed: {e}")
            return False
