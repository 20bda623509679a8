"""Base adapter interface for vision extraction."""

from abc import ABC, abstractmethod


class VisionAdapter(ABC):
    """Abstract base class for multimodal inference adapters.

    An adapter issues exactly one request per call and lets any failure
    propagate; the extraction client decides what the caller sees.
    """

    provider: str = ""

    def __init__(self, model: str):
        self.model = model

    @abstractmethod
    async def generate_json(
        self,
        image_base64: str,
        mime_type: str,
        instruction: str,
        system_instruction: str,
    ) -> str:
        """Send the image and instruction and return the model's raw text.

        Args:
            image_base64: Base64-encoded image bytes
            mime_type: Media type of the encoded image (e.g. image/png)
            instruction: Resolved template instruction
            system_instruction: Directive asking for bare JSON output

        Returns:
            Text of the response, expected to be JSON
        """
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the provider is reachable.

        Returns:
            True if available, False otherwise
        """
        pass
