"""Word-by-word reveal of finished replies.

Hides the pacing of the typewriter effect: how text is split, how long to
pause between words, and how concurrent reveals are kept apart.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

from ..exceptions import RevealInProgressError
from .config import REVEAL_BASE_DELAY, REVEAL_JITTER

logger = logging.getLogger(__name__)

RevealCallback = Callable[[int, str], None]


class TypewriterRevealer:
    """Reveals text into a live message one word at a time.

    Each step calls ``apply(message_id, partial_text)`` and then yields to
    the event loop for ``base_delay + rng.random() * jitter`` seconds.
    The partial text only ever grows; if the reveal task is cancelled the
    last applied text is a prefix of the finished string.
    """

    def __init__(
        self,
        base_delay: float = REVEAL_BASE_DELAY,
        jitter: float = REVEAL_JITTER,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if base_delay < 0 or jitter < 0:
            raise ValueError("base_delay and jitter must be non-negative")
        self._base_delay = base_delay
        self._jitter = jitter
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._active: set[int] = set()

    @property
    def base_delay(self) -> float:
        return self._base_delay

    @property
    def jitter(self) -> float:
        return self._jitter

    def is_revealing(self, message_id: int) -> bool:
        return message_id in self._active

    def next_delay(self) -> float:
        """Pause after one word, within [base_delay, base_delay + jitter]."""
        return self._base_delay + self._rng.random() * self._jitter

    async def reveal(self, text: str, message_id: int, apply: RevealCallback) -> None:
        """Reveal text into the message identified by message_id.

        Args:
            text: Finished text; split on single spaces
            message_id: Target message
            apply: Receives each partial text, starting from the first word

        Raises:
            RevealInProgressError: If the message is already being revealed
        """
        if message_id in self._active:
            raise RevealInProgressError(message_id)
        if not text:
            return

        self._active.add(message_id)
        try:
            words = text.split(" ")
            logger.debug("Revealing %d words into message %d", len(words), message_id)
            current = ""
            for index, word in enumerate(words):
                current = word if index == 0 else f"{current} {word}"
                apply(message_id, current)
                await self._sleep(self.next_delay())
        finally:
            self._active.discard(message_id)
