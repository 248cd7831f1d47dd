"""Abstract interface to a remote language model.

The chat core only ever talks to this interface; which vendor answers,
and how its SDK is driven, stays inside the concrete provider.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse, ModelInfo


class LLMProvider(ABC):
    """A remote model service with a catalogue and a completion endpoint.

    Providers own an SDK client, so use them as async context managers
    (or call ``close``) to release the transport:

        async with provider:
            models = await provider.list_models()
    """

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        """Return the catalogue advertised to the current credentials.

        Returns:
            Models in the order the service listed them

        Raises:
            ModelDiscoveryError: If the catalogue request fails
        """

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Request one reply for the given messages.

        Args:
            messages: Conversation turns to send, in order
            model: Model name; falls back to the provider's default
            temperature: Sampling temperature, None for the service default
            max_tokens: Upper bound on generated tokens
            **kwargs: Extra generation options understood by the provider

        Returns:
            LLMResponse whose content is empty when the reply had no text

        Raises:
            CompletionRequestError: If the request is rejected or no model is set
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying client."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx can report a closed loop while tearing down at interpreter exit
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
