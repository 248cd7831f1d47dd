"""Unit tests for startup model selection."""
import pytest

from gemchat.chat import ModelSelector, rank_models
from gemchat.exceptions import ModelDiscoveryError
from gemchat.llm import ModelInfo

GENERATE = ("generateContent", "countTokens")


def _model(name: str, version: str = "001", methods=GENERATE) -> ModelInfo:
    return ModelInfo(name=name, version=version, supported_generation_methods=methods)


class TestRankModels:
    """Tests for rank_models."""

    def test_filters_by_capability_and_family(self):
        models = [
            _model("models/embedding-001", methods=("embedContent",)),
            _model("models/gemini-embed", methods=("embedContent",)),
            _model("models/imagen-3", methods=GENERATE),
            _model("models/gemini-2.5-flash"),
        ]
        ranked = rank_models(models)
        assert [m.name for m in ranked] == ["models/gemini-2.5-flash"]

    def test_sorts_by_version_descending(self):
        models = [
            _model("models/gemini-a", version="001"),
            _model("models/gemini-b", version="2.5"),
            _model("models/gemini-c", version="002"),
        ]
        assert [m.short_name for m in rank_models(models)] == ["gemini-b", "gemini-c", "gemini-a"]

    def test_version_comparison_is_lexicographic(self):
        models = [
            _model("models/gemini-ten", version="10"),
            _model("models/gemini-nine", version="9"),
        ]
        assert rank_models(models)[0].short_name == "gemini-nine"

    def test_ties_keep_listing_order(self):
        models = [
            _model("models/gemini-first", version="001"),
            _model("models/gemini-second", version="001"),
            _model("models/gemini-third", version="001"),
        ]
        assert [m.short_name for m in rank_models(models)] == [
            "gemini-first", "gemini-second", "gemini-third",
        ]

    def test_model_info_accepts_api_field_names(self):
        info = ModelInfo.model_validate({
            "name": "models/gemini-pro",
            "version": "001",
            "supportedGenerationMethods": ["generateContent"],
        })
        assert info.supported_generation_methods == ("generateContent",)
        assert info.short_name == "gemini-pro"


class TestModelSelector:
    """Tests for ModelSelector."""

    @pytest.mark.asyncio
    async def test_selects_short_name_of_best_candidate(self, provider):
        provider.models = [
            _model("models/gemini-1.0-pro", version="001"),
            _model("models/gemini-2.5-flash", version="2.5"),
        ]
        selector = ModelSelector(provider)

        assert await selector.select() == "gemini-2.5-flash"
        assert selector.selected == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_no_candidates_leaves_selection_empty(self, provider):
        provider.models = [_model("models/text-bison")]
        assert await ModelSelector(provider).select() is None

    @pytest.mark.asyncio
    async def test_listing_failure_is_logged_not_raised(self, provider, caplog):
        provider.list_error = ModelDiscoveryError("network down")
        selector = ModelSelector(provider)

        assert await selector.select() is None
        assert selector.selected is None
        assert "network down" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_family(self, provider):
        provider.models = [_model("models/gemma-3"), _model("models/gemini-2.0")]
        assert await ModelSelector(provider, family="gemma").select() == "gemma-3"
