"""Gemini provider over the google-genai SDK.

Replies are read from one fixed position, the first part of the first
candidate. Safety-filtered or otherwise empty replies come back as an empty
string so the chat session can substitute its own fallback text.
"""

import asyncio
from typing import Any

from google import genai
from google.genai import errors, types

from ...exceptions import CompletionRequestError, ModelDiscoveryError
from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, ModelInfo

# ChatMessage role -> Gemini content role
_ROLES = {"user": "user", "assistant": "model"}


class GeminiProvider(LLMProvider):
    """Talks to the Gemini API through ``genai.Client.aio``.

    Hidden design decisions:
    - SDK client construction and teardown
    - Mapping SDK model descriptors onto ModelInfo
    - Where the reply text sits inside a response
    """

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        max_retries: int = 1,
        page_size: int = 100,
        **client_kwargs: Any
    ):
        """Create the provider.

        Args:
            api_key: Gemini API key
            model: Default model; usually left unset and chosen by ModelSelector
            max_retries: Attempts per completion while the reply is empty (default 1)
            page_size: Models fetched per page when listing
            **client_kwargs: Passed through to ``genai.Client``
        """
        self._model = model
        self._max_retries = max(1, max_retries)
        self._page_size = page_size
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str | None:
        return self._model

    def _convert_messages(self, messages: list[ChatMessage]) -> tuple[str | None, list[types.Content]]:
        """Split messages into a system instruction and Gemini contents."""
        system_instruction = None
        contents = []
        for message in messages:
            if message.role == "system":
                system_instruction = message.content
                continue
            role = _ROLES.get(message.role)
            if role is not None:
                contents.append(types.Content(role=role, parts=[types.Part(text=message.content)]))
        return system_instruction, contents

    def _extract_content(self, response: Any) -> str:
        """Read ``candidates[0].content.parts[0].text``.

        Args:
            response: A GenerateContentResponse, or anything shaped like one

        Returns:
            The text, or "" when any link in that path is missing
        """
        candidates = getattr(response, "candidates", None)
        if not candidates:
            return ""
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None)
        if not parts:
            return ""
        text = getattr(parts[0], "text", None)
        return text if isinstance(text, str) else ""

    @staticmethod
    def _to_model_info(model: Any) -> ModelInfo:
        return ModelInfo(
            name=model.name or "",
            version=model.version or "",
            supported_generation_methods=tuple(model.supported_actions or ()),
        )

    @staticmethod
    def _usage(response: Any) -> dict[str, int] | None:
        metadata = response.usage_metadata
        if not metadata:
            return None
        return {
            "prompt_tokens": metadata.prompt_token_count or 0,
            "completion_tokens": metadata.candidates_token_count or 0,
            "total_tokens": metadata.total_token_count or 0,
        }

    async def list_models(self) -> list[ModelInfo]:
        """List every model visible to the API key, following all pages.

        Raises:
            ModelDiscoveryError: If the API rejects the request
        """
        models = []
        try:
            pager = await self._client.aio.models.list(config={"page_size": self._page_size})
            async for model in pager:
                models.append(self._to_model_info(model))
        except errors.APIError as e:
            raise ModelDiscoveryError(f"Listing Gemini models failed: {e}") from e
        return models

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send one generate_content request.

        A generation config is only attached when a system message or
        generation option is given; the chat session sends a bare user turn.

        Raises:
            CompletionRequestError: If no model is available or the API rejects the request
        """
        target = model or self._model
        if not target:
            raise CompletionRequestError("No Gemini model selected")
        system_instruction, contents = self._convert_messages(messages)

        config = None
        if system_instruction is not None or temperature is not None or max_tokens is not None or kwargs:
            config = types.GenerateContentConfig(
                system_instruction=system_instruction,
                temperature=temperature,
                max_output_tokens=max_tokens,
                **kwargs
            )

        content = ""
        usage = None
        for attempt in range(self._max_retries):
            try:
                response = await self._client.aio.models.generate_content(
                    model=target,
                    contents=contents,
                    config=config,
                )
            except errors.APIError as e:
                raise CompletionRequestError(f"Gemini request failed: {e}") from e

            usage = self._usage(response) or usage
            content = self._extract_content(response)
            if content:
                break
            if attempt + 1 < self._max_retries:
                await asyncio.sleep(0.5 * (attempt + 1))

        return LLMResponse(content=content, model=target, usage=usage)

    async def close(self) -> None:
        """Close the async transport when the SDK exposes one."""
        aclose = getattr(self._client.aio, "aclose", None)
        if aclose is not None:
            await aclose()
