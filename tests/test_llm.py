"""Unit tests for the Gemini provider and the provider factory.

The SDK client is replaced with small fakes, so these tests never reach
the network.
"""
from types import SimpleNamespace

import pytest
from google.genai import errors

from gemchat.exceptions import CompletionRequestError, ModelDiscoveryError
from gemchat.llm import ChatMessage, GeminiProvider, create_llm_provider


def _api_error(code: int = 500, message: str = "boom") -> errors.APIError:
    return errors.APIError(code, {"error": {"code": code, "message": message, "status": "INTERNAL"}})


def _response(text=None, candidates=None, usage=None):
    if candidates is None:
        part = SimpleNamespace(text=text)
        candidates = [SimpleNamespace(content=SimpleNamespace(parts=[part]))]
    return SimpleNamespace(candidates=candidates, usage_metadata=usage)


class _Pager:
    def __init__(self, items):
        self._items = items

    async def __aiter__(self):
        for item in self._items:
            yield item


class _FakeModels:
    def __init__(self, responses=(), listed=(), error=None):
        self.responses = list(responses)
        self.listed = list(listed)
        self.error = error
        self.requests = []

    async def generate_content(self, model, contents, config=None):
        self.requests.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    async def list(self, config=None):
        if self.error is not None:
            raise self.error
        return _Pager(self.listed)


def _provider(models: _FakeModels, **kwargs) -> GeminiProvider:
    provider = GeminiProvider(api_key="test-key", **kwargs)
    provider._client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return provider


class TestProviderFactory:
    """Tests for create_llm_provider."""

    def test_create_gemini(self):
        provider = create_llm_provider("Gemini", api_key="test-key", model="gemini-2.5-flash")
        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-flash"

    def test_missing_api_key(self):
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("gemini")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("openai", api_key="x")


class TestExtractContent:
    """Tests for reading reply text out of a response."""

    @pytest.fixture
    def gemini(self):
        return _provider(_FakeModels())

    def test_reads_first_part_of_first_candidate(self, gemini):
        assert gemini._extract_content(_response("Hello")) == "Hello"

    @pytest.mark.parametrize("response", [
        SimpleNamespace(candidates=None),
        SimpleNamespace(candidates=[]),
        SimpleNamespace(candidates=[SimpleNamespace(content=None)]),
        SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[]))]),
        SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text=None)]))]),
        SimpleNamespace(),
    ])
    def test_structural_deviation_gives_empty_text(self, gemini, response):
        assert gemini._extract_content(response) == ""

    def test_only_first_part_is_used(self, gemini):
        parts = [SimpleNamespace(text="first"), SimpleNamespace(text="second")]
        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])
        assert gemini._extract_content(response) == "first"


class TestListModels:
    """Tests for GeminiProvider.list_models."""

    @pytest.mark.asyncio
    async def test_maps_sdk_models(self):
        listed = [
            SimpleNamespace(name="models/gemini-2.5-flash", version="001",
                            supported_actions=["generateContent", "countTokens"]),
            SimpleNamespace(name="models/embedding-001", version=None, supported_actions=None),
        ]
        provider = _provider(_FakeModels(listed=listed))

        models = await provider.list_models()

        assert [m.short_name for m in models] == ["gemini-2.5-flash", "embedding-001"]
        assert models[0].supported_generation_methods == ("generateContent", "countTokens")
        assert models[1].version == ""
        assert models[1].supported_generation_methods == ()

    @pytest.mark.asyncio
    async def test_api_error_becomes_discovery_error(self):
        provider = _provider(_FakeModels(error=_api_error(403, "forbidden")))
        with pytest.raises(ModelDiscoveryError):
            await provider.list_models()


class TestChatCompletion:
    """Tests for GeminiProvider.chat_completion."""

    @pytest.mark.asyncio
    async def test_sends_single_user_turn(self):
        models = _FakeModels(responses=[_response("Hi!")])
        provider = _provider(models)

        response = await provider.chat_completion(
            [ChatMessage(role="user", content="Hello")], model="gemini-2.5-flash",
        )

        assert response.content == "Hi!"
        assert response.model == "gemini-2.5-flash"
        assert response.usage is None
        request = models.requests[0]
        assert request["model"] == "gemini-2.5-flash"
        assert request["config"] is None
        assert len(request["contents"]) == 1
        assert request["contents"][0].role == "user"
        assert request["contents"][0].parts[0].text == "Hello"

    @pytest.mark.asyncio
    async def test_generation_parameters_build_config(self):
        models = _FakeModels(responses=[_response("ok")])
        provider = _provider(models, model="gemini-2.5-pro")

        await provider.chat_completion(
            [ChatMessage(role="system", content="Be brief"), ChatMessage(role="user", content="Hi")],
            temperature=0.2,
            max_tokens=64,
        )

        request = models.requests[0]
        assert request["model"] == "gemini-2.5-pro"
        assert request["config"].temperature == 0.2
        assert request["config"].max_output_tokens == 64
        assert [c.role for c in request["contents"]] == ["user"]

    @pytest.mark.asyncio
    async def test_usage_is_reported(self):
        usage = SimpleNamespace(prompt_token_count=3, candidates_token_count=5, total_token_count=8)
        provider = _provider(_FakeModels(responses=[_response("ok", usage=usage)]))

        response = await provider.chat_completion([ChatMessage(role="user", content="Hi")], model="m")

        assert response.usage == {"prompt_tokens": 3, "completion_tokens": 5, "total_tokens": 8}

    @pytest.mark.asyncio
    async def test_missing_candidates_gives_empty_content(self):
        provider = _provider(_FakeModels(responses=[_response(candidates=[])]))
        response = await provider.chat_completion([ChatMessage(role="user", content="Hi")], model="m")
        assert response.content == ""

    @pytest.mark.asyncio
    async def test_empty_reply_is_retried(self):
        models = _FakeModels(responses=[_response(candidates=[]), _response("second try")])
        provider = _provider(models, max_retries=2)

        response = await provider.chat_completion([ChatMessage(role="user", content="Hi")], model="m")

        assert response.content == "second try"
        assert len(models.requests) == 2

    @pytest.mark.asyncio
    async def test_api_error_becomes_request_error(self):
        provider = _provider(_FakeModels(error=_api_error()))
        with pytest.raises(CompletionRequestError):
            await provider.chat_completion([ChatMessage(role="user", content="Hi")], model="m")

    @pytest.mark.asyncio
    async def test_no_model_is_an_error(self):
        provider = _provider(_FakeModels(responses=[_response("unused")]))
        with pytest.raises(CompletionRequestError, match="No Gemini model"):
            await provider.chat_completion([ChatMessage(role="user", content="Hi")])

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        closed = []

        async def aclose():
            closed.append(True)

        provider = _provider(_FakeModels())
        provider._client.aio.aclose = aclose

        async with provider:
            pass

        assert closed == [True]


@pytest.mark.integration
class TestGeminiLive:
    """Live API checks, skipped without GEMINI_API_KEY."""

    @pytest.mark.asyncio
    async def test_lists_generate_capable_models(self, api_keys):
        if not api_keys["gemini"]:
            pytest.skip("GEMINI_API_KEY not set")
        async with GeminiProvider(api_key=api_keys["gemini"]) as provider:
            models = await provider.list_models()
        assert any("generateContent" in m.supported_generation_methods for m in models)
