"""Extraction client: one inference call per image/template request."""

import json
import logging
import time

from visionscript.adapters import VisionAdapter, get_adapter
from visionscript.exceptions import ExtractionError
from visionscript.templates import SYSTEM_INSTRUCTION, ExtractionTemplate, resolve_instruction

logger = logging.getLogger(__name__)


class ExtractionClient:
    """Turns an image plus an extraction template into the model's JSON text."""

    def __init__(self, adapter: VisionAdapter):
        self.adapter = adapter

    async def analyze_image_to_json(
        self,
        image_base64: str,
        mime_type: str,
        template: ExtractionTemplate,
        custom_prompt: str | None = None,
    ) -> str:
        """Run one extraction against the inference service.

        Args:
            image_base64: Base64-encoded image bytes
            mime_type: Media type of the image
            template: Extraction template to apply
            custom_prompt: Instruction override for the CUSTOM template

        Returns:
            The response text with surrounding whitespace removed

        Raises:
            ExtractionError: On any failure of the underlying call. The
                original error is logged, never attached.
        """
        instruction = resolve_instruction(template, custom_prompt)
        start_time = time.time()

        try:
            text = await self.adapter.generate_json(
                image_base64, mime_type, instruction, SYSTEM_INSTRUCTION
            )
            if text is None:
                raise ValueError("Inference service returned no text")
        except Exception as e:
            logger.error(
                f"{self.adapter.provider} extraction failed for template "
                f"{template.name}: {e.__class__.__name__}: {e}"
            )
            raise ExtractionError() from None

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            json.dumps(
                {
                    "event": "extraction_complete",
                    "provider": self.adapter.provider,
                    "model": self.adapter.model,
                    "template": template.name,
                    "mimeType": mime_type,
                    "chars": len(text),
                    "elapsed_ms": elapsed_ms,
                }
            )
        )
        return text.strip()


def create_client(
    provider: str | None = None, api_key: str | None = None, model: str | None = None
) -> ExtractionClient:
    """Build a client over the adapter for the given (or configured) provider."""
    return ExtractionClient(get_adapter(provider=provider, api_key=api_key, model=model))
