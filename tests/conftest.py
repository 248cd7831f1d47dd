"""Pytest configuration and shared fixtures."""
import asyncio
import itertools
import os

import pytest

from gemchat.chat import ChatSessionController, ConversationStore, IdGenerator, TypewriterRevealer
from gemchat.llm import LLMProvider, LLMResponse, ModelInfo
from gemchat.storage.in_memory import InMemoryStorage


class FakeProvider(LLMProvider):
    """Scriptable provider that records every request."""

    def __init__(self, reply: str = "Hello there", models: list[ModelInfo] | None = None):
        self.reply = reply
        self.error: Exception | None = None
        self.list_error: Exception | None = None
        self.models = models or []
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[list, str | None]] = []
        self.closed = False

    async def list_models(self) -> list[ModelInfo]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.models)

    async def chat_completion(self, messages, model=None, temperature=None, max_tokens=None, **kwargs):
        self.calls.append((list(messages), model))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model=model or "fake")

    async def close(self) -> None:
        self.closed = True


async def _wait_until(predicate, attempts: int = 50) -> None:
    """Yield to the event loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"gemini": os.getenv("GEMINI_API_KEY")}


@pytest.fixture
def wait_until():
    """Poll a predicate while yielding to the event loop."""
    return _wait_until


@pytest.fixture
def ids():
    """Deterministic id generator starting at 1000."""
    counter = itertools.count(1000)
    return IdGenerator(clock=lambda: next(counter))


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    return ConversationStore(storage)


@pytest.fixture
def revealer():
    """Revealer without pauses."""
    return TypewriterRevealer(base_delay=0, jitter=0)


@pytest.fixture
def controller(provider, store, revealer, ids):
    return ChatSessionController(
        provider=provider,
        store=store,
        revealer=revealer,
        model="gemini-test",
        ids=ids,
    )
