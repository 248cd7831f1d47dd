"""Data models for conversations.

These models define the structure of messages and conversations,
independent of the storage backend used. JSON field names are camelCase.
"""

import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .config import DEFAULT_TITLE, TITLE_ELLIPSIS, TITLE_MAX_LENGTH


class Sender(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single chat message.

    Frozen: the in-flight assistant message is updated by replacing it
    with a copy carrying the new text.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Monotonically increasing id (creation time in ms)")
    sender: Sender
    text: str = ""

    def with_text(self, text: str) -> "Message":
        return self.model_copy(update={"text": text})


class Conversation(BaseModel):
    """A named, persisted conversation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str = DEFAULT_TITLE
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


ConversationCollection = TypeAdapter(list[Conversation])


def derive_title(messages: Sequence[Message]) -> str:
    """Title from the first message: first 30 characters plus an ellipsis."""
    if not messages:
        return DEFAULT_TITLE
    return messages[0].text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator:
    """Timestamp-based ids that never repeat or go backwards."""

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._last = 0

    def next_id(self) -> int:
        self._last = max(self._clock(), self._last + 1)
        return self._last
