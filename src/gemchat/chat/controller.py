"""Chat session orchestration.

Hides the turn protocol: how a submission becomes a user message, a remote
call, a revealed reply, and a committed conversation. The controller owns
the transient view state; renderers subscribe to its events and never
mutate it.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..exceptions import StorageError
from ..llm import ChatMessage, LLMProvider
from .config import ERROR_REPLY, FALLBACK_REPLY, REQUEST_TIMEOUT_SECONDS
from .formatter import format_response
from .models import Conversation, IdGenerator, Message, Sender
from .store import ConversationStore
from .typewriter import TypewriterRevealer

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Turn progress of a chat session."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    REVEALING = "revealing"


class SessionEventKind(str, Enum):
    MESSAGE_ADDED = "message_added"
    MESSAGE_UPDATED = "message_updated"
    STATE_CHANGED = "state_changed"
    VIEW_RESET = "view_reset"
    CONVERSATIONS_CHANGED = "conversations_changed"
    MODEL_CHANGED = "model_changed"


@dataclass(frozen=True)
class SessionEvent:
    """Notification sent to subscribers after the controller changes state."""

    kind: SessionEventKind
    message: Message | None = None


SessionListener = Callable[[SessionEvent], None]


class ChatSessionController:
    """Runs chat turns against one provider and one conversation store.

    At most one turn is in flight; submissions made while a turn is running
    are dropped. Each request carries only the current user text, no history.
    """

    def __init__(
        self,
        provider: LLMProvider,
        store: ConversationStore,
        revealer: TypewriterRevealer | None = None,
        model: str | None = None,
        request_timeout: float | None = REQUEST_TIMEOUT_SECONDS,
        ids: IdGenerator | None = None,
    ):
        self._provider = provider
        self._store = store
        self._revealer = revealer or TypewriterRevealer()
        self._model = model
        self._request_timeout = request_timeout
        self._ids = ids or IdGenerator()
        self._state = SessionState.IDLE
        self._messages: list[Message] = []
        self._active_id: int | None = None
        self._loading = False
        self._listeners: list[SessionListener] = []

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is SessionState.IDLE and not self._loading

    @property
    def model(self) -> str | None:
        return self._model

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def active_conversation_id(self) -> int | None:
        return self._active_id

    @property
    def conversations(self) -> tuple[Conversation, ...]:
        return self._store.conversations

    # ------------------------------------------------------------------
    # Observer contract
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: SessionEventKind, message: Message | None = None) -> None:
        event = SessionEvent(kind=kind, message=message)
        for listener in list(self._listeners):
            listener(event)

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.debug("Session state %s -> %s", self._state.value, state.value)
        self._state = state
        self._emit(SessionEventKind.STATE_CHANGED)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Load stored conversations and resume the first one, if any.

        Returns False without loading while a turn is running. The session
        is busy until the load finishes, so no turn or navigation can
        interleave with it.

        Raises:
            StorageError: If the backend cannot be read
        """
        if not self.is_idle:
            return False
        self._loading = True
        try:
            conversations = await self._store.load()
        finally:
            self._loading = False
        self._emit(SessionEventKind.CONVERSATIONS_CHANGED)
        if conversations:
            self._activate(conversations[0])
        return True

    def set_model(self, model: str | None) -> None:
        """Set the model used for new turns; None disables sending."""
        self._model = model
        self._emit(SessionEventKind.MODEL_CHANGED)

    def _reset_view(self) -> None:
        self._messages = []
        self._active_id = None
        self._emit(SessionEventKind.VIEW_RESET)

    def _activate(self, conversation: Conversation) -> None:
        self._active_id = conversation.id
        self._messages = list(conversation.messages)
        self._emit(SessionEventKind.VIEW_RESET)

    def new_chat(self) -> bool:
        """Start a fresh, unsaved session."""
        if not self.is_idle:
            return False
        self._reset_view()
        return True

    def select_conversation(self, conversation_id: int) -> bool:
        """Make a stored conversation the active one."""
        if not self.is_idle:
            return False
        conversation = self._store.get(conversation_id)
        if conversation is None:
            return False
        self._activate(conversation)
        return True

    async def delete_conversation(self, conversation_id: int) -> bool:
        """Delete a stored conversation, resetting the session if it was active."""
        if not self.is_idle:
            return False
        try:
            removed = await self._store.remove(conversation_id)
        except StorageError as e:
            logger.error("Failed to persist deletion of %d: %s", conversation_id, e)
            removed = self._store.get(conversation_id) is None
        if not removed:
            return False
        self._emit(SessionEventKind.CONVERSATIONS_CHANGED)
        if self._active_id == conversation_id:
            self._reset_view()
        return True

    # ------------------------------------------------------------------
    # Turn protocol
    # ------------------------------------------------------------------

    def can_submit(self, text: str) -> bool:
        return bool(text.strip()) and self._model is not None and self.is_idle

    def _append(self, sender: Sender, text: str) -> Message:
        message = Message(id=self._ids.next_id(), sender=sender, text=text)
        self._messages.append(message)
        self._emit(SessionEventKind.MESSAGE_ADDED, message)
        return message

    def _update_message_text(self, message_id: int, text: str) -> None:
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                updated = message.with_text(text)
                self._messages[index] = updated
                self._emit(SessionEventKind.MESSAGE_UPDATED, updated)
                return

    async def _request_reply(self, text: str, model: str) -> str:
        request = self._provider.chat_completion(
            [ChatMessage(role="user", content=text)],
            model=model,
        )
        if self._request_timeout is None:
            response = await request
        else:
            response = await asyncio.wait_for(request, timeout=self._request_timeout)
        return response.content or FALLBACK_REPLY

    async def _commit(self) -> None:
        conversation = self._store.record_turn(self._active_id, self._messages)
        self._active_id = conversation.id
        self._emit(SessionEventKind.CONVERSATIONS_CHANGED)
        try:
            await self._store.persist()
        except StorageError as e:
            logger.error("Failed to persist turn: %s", e)

    async def submit(self, text: str) -> bool:
        """Run one turn.

        Returns False without touching any state when the text is blank,
        no model is selected, or another turn is in progress. Otherwise
        returns True once the turn has been committed.
        """
        if not self.can_submit(text):
            return False

        prompt = text.strip()
        model = self._model
        self._append(Sender.USER, prompt)
        self._set_state(SessionState.AWAITING_RESPONSE)

        try:
            reply: str | None = None
            try:
                reply = await self._request_reply(prompt, model)
            except asyncio.TimeoutError:
                logger.error("Completion request timed out after %ss", self._request_timeout)
            except Exception as e:
                logger.error("Completion request failed: %s", e)

            if reply is None:
                # Errors skip the reveal and are committed like any reply
                self._append(Sender.ASSISTANT, ERROR_REPLY)
                await self._commit()
                return True

            formatted = format_response(reply)
            placeholder = self._append(Sender.ASSISTANT, "")
            self._set_state(SessionState.REVEALING)
            await self._revealer.reveal(formatted, placeholder.id, self._update_message_text)
            self._update_message_text(placeholder.id, formatted)
            await self._commit()
            return True
        finally:
            self._set_state(SessionState.IDLE)
