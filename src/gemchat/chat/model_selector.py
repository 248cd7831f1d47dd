"""Startup model discovery.

Hides how the active model is picked from the provider's catalogue.
"""

import logging
from collections.abc import Iterable

from ..llm import LLMProvider, ModelInfo
from .config import GENERATE_CAPABILITY, MODEL_FAMILY

logger = logging.getLogger(__name__)


def rank_models(
    models: Iterable[ModelInfo],
    family: str = MODEL_FAMILY,
    capability: str = GENERATE_CAPABILITY,
) -> list[ModelInfo]:
    """Filter and order candidate models, best first.

    Keeps models that support ``capability`` and whose name contains
    ``family``, sorted by version string descending. The comparison is
    plain string ordering, not semantic versioning; equal versions keep
    their listing order.
    """
    candidates = [
        m for m in models
        if capability in m.supported_generation_methods and family in m.name
    ]
    return sorted(candidates, key=lambda m: m.version, reverse=True)


class ModelSelector:
    """Picks one model at startup.

    A failed or empty listing leaves the selection unset; there is no retry.
    """

    def __init__(
        self,
        provider: LLMProvider,
        family: str = MODEL_FAMILY,
        capability: str = GENERATE_CAPABILITY,
    ):
        self._provider = provider
        self._family = family
        self._capability = capability
        self._selected: str | None = None

    @property
    def family(self) -> str:
        return self._family

    @property
    def capability(self) -> str:
        return self._capability

    @property
    def selected(self) -> str | None:
        return self._selected

    async def select(self) -> str | None:
        """List models once and return the short name of the best candidate."""
        try:
            models = await self._provider.list_models()
            ranked = rank_models(models, self._family, self._capability)
        except Exception as e:
            logger.warning("Model discovery failed: %s", e)
            self._selected = None
            return None

        if not ranked:
            logger.warning(
                "No '%s' model supports %s (%d listed)",
                self._family, self._capability, len(models),
            )
            self._selected = None
            return None

        self._selected = ranked[0].short_name
        logger.info("Selected model %s (version %s)", self._selected, ranked[0].version or "n/a")
        return self._selected
