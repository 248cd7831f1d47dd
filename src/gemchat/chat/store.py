"""Durable conversation collection.

Hides how conversations are serialized and when they are written:
the whole collection lives under one storage key as JSON and is
rewritten after every mutation.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from pydantic import ValidationError

from ..exceptions import MalformedStoragePayload, StorageError
from ..storage import KeyValueStorage
from .config import STORAGE_KEY
from .models import Conversation, ConversationCollection, IdGenerator, Message, derive_title

logger = logging.getLogger(__name__)


class ConversationStore:
    """Owns the list of conversations and persists it on every change.

    New conversations are prepended; updated ones stay where they are.

    By default an empty collection is never written, so deleting the last
    conversation leaves the previous payload in storage and it reappears on
    the next load. Pass ``persist_empty=True`` to write empty collections too.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        ids: IdGenerator | None = None,
        persist_empty: bool = False,
    ):
        self._storage = storage
        self._key = key
        self._ids = ids or IdGenerator()
        self._persist_empty = persist_empty
        self._conversations: list[Conversation] = []
        self._read_failed = False

    @property
    def conversations(self) -> tuple[Conversation, ...]:
        return tuple(self._conversations)

    @property
    def key(self) -> str:
        return self._key

    def get(self, conversation_id: int) -> Conversation | None:
        for conversation in self._conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    @staticmethod
    def decode(payload: str) -> list[Conversation]:
        """Parse a stored payload.

        Raises:
            MalformedStoragePayload: If the payload is not a valid collection
        """
        try:
            return ConversationCollection.validate_json(payload)
        except ValidationError as e:
            raise MalformedStoragePayload(str(e)) from e

    @staticmethod
    def encode(conversations: Sequence[Conversation]) -> str:
        return ConversationCollection.dump_json(list(conversations), by_alias=True).decode()

    @property
    def read_failed(self) -> bool:
        """Whether the last load could not reach the backend."""
        return self._read_failed

    async def load(self) -> list[Conversation]:
        """Read the collection from storage.

        Missing or malformed payloads load as an empty collection.

        Raises:
            StorageError: If the backend cannot be read. The collection is
                left empty and later writes are refused so the unread
                payload is not overwritten.
        """
        try:
            payload = await self._storage.get(self._key)
        except StorageError:
            self._conversations = []
            self._read_failed = True
            raise
        self._read_failed = False
        if payload is None:
            self._conversations = []
            return []

        try:
            self._conversations = self.decode(payload)
        except MalformedStoragePayload as e:
            logger.warning("Ignoring malformed conversation storage '%s': %s", self._key, e)
            self._conversations = []

        logger.debug("Loaded %d conversation(s)", len(self._conversations))
        return list(self._conversations)

    async def persist(self) -> None:
        """Write the whole collection, skipping empty ones unless configured."""
        if not self._conversations and not self._persist_empty:
            logger.debug("Collection is empty; leaving stored payload untouched")
            return
        if self._read_failed:
            raise StorageError(f"Refusing to overwrite '{self._key}': it could not be read at load time")
        try:
            await self._storage.set(self._key, self.encode(self._conversations))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to persist conversations: {e}") from e

    def record_turn(
        self,
        active_id: int | None,
        messages: Sequence[Message],
    ) -> Conversation:
        """Apply a finished turn to the in-memory collection without writing it.

        Args:
            active_id: Conversation receiving the turn, or None for a fresh session
            messages: Full message list of the conversation after the turn

        Returns:
            The updated or newly created conversation
        """
        now = datetime.now(timezone.utc)
        index = next(
            (i for i, c in enumerate(self._conversations) if c.id == active_id),
            None,
        )

        if index is not None:
            conversation = self._conversations[index].model_copy(
                update={"messages": list(messages), "updated_at": now}
            )
            self._conversations[index] = conversation
        else:
            conversation = Conversation(
                id=self._ids.next_id(),
                title=derive_title(messages),
                messages=list(messages),
                created_at=now,
                updated_at=now,
            )
            self._conversations.insert(0, conversation)
            logger.info("Created conversation %d '%s'", conversation.id, conversation.title)
        return conversation

    async def commit_turn(
        self,
        active_id: int | None,
        messages: Sequence[Message],
    ) -> Conversation:
        """Record a finished turn and persist the collection.

        Raises:
            StorageError: If the write fails; the turn stays recorded in memory
        """
        conversation = self.record_turn(active_id, messages)
        await self.persist()
        return conversation

    async def remove(self, conversation_id: int) -> bool:
        """Delete a conversation. Returns whether one was removed."""
        remaining = [c for c in self._conversations if c.id != conversation_id]
        if len(remaining) == len(self._conversations):
            return False
        self._conversations = remaining
        logger.info("Deleted conversation %d", conversation_id)
        await self.persist()
        return True
