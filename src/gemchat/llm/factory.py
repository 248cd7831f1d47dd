"""Factory for LLM providers."""

from typing import Any

from .base import LLMProvider
from .providers import GeminiProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Build a provider by name.

    Args:
        provider: Provider name, case-insensitive (only 'gemini' today)
        **config: Keyword arguments for the provider; Gemini needs ``api_key``
            and optionally takes ``model``, ``max_retries`` and ``page_size``

    Returns:
        A provider ready to list models and answer completions

    Raises:
        TypeError: If ``api_key`` is missing
        ValueError: If the provider name is unknown

    Examples:
        >>> provider = create_llm_provider("gemini", api_key="...")
    """
    name = provider.lower()

    if name == "gemini":
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiProvider(**config)

    raise ValueError(f"Unsupported provider: {provider}. Supported providers: 'gemini'")
