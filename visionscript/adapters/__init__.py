"""Adapter factory and exports."""
from visionscript import config
from visionscript.adapters.base import VisionAdapter


def get_adapter(
    provider: str | None = None, api_key: str | None = None, model: str | None = None
) -> VisionAdapter:
    """Get an inference adapter.

    Args:
        provider: gemini, openai, anthropic or ollama (defaults to EXTRACTOR_PROVIDER)
        api_key: Credential for hosted providers (defaults to the configured key)
        model: Vision model name (defaults to the provider's configured model)

    Returns:
        VisionAdapter instance for the provider
    """
    provider = (provider or config.EXTRACTOR_PROVIDER).lower()
    if api_key is None:
        api_key = config.api_key_for(provider)
    model = model or config.model_for(provider)

    if provider == "gemini":
        from visionscript.adapters.gemini import GeminiAdapter
        return GeminiAdapter(api_key=api_key, model=model)
    elif provider == "openai":
        from visionscript.adapters.openai import OpenAIAdapter
        return OpenAIAdapter(api_key=api_key, model=model)
    elif provider == "anthropic":
        from visionscript.adapters.anthropic import AnthropicAdapter
        return AnthropicAdapter(api_key=api_key, model=model)
    elif provider == "ollama":
        from visionscript.adapters.ollama import OllamaAdapter
        return OllamaAdapter(base_url=config.OLLAMA_URL, model=model)
    raise ValueError(f"Unknown extractor provider: {provider!r}")


__all__ = ["VisionAdapter", "get_adapter"]
