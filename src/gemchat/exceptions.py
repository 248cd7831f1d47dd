"""Exception hierarchy for gemchat.

Every error raised on purpose by the package derives from GemchatError,
so callers at the UI seam can tell expected failures from bugs.
"""


class GemchatError(Exception):
    """Base class for all gemchat errors."""


class ModelDiscoveryError(GemchatError):
    """Listing the available models failed."""


class CompletionRequestError(GemchatError):
    """A completion request failed or returned an unusable payload."""


class MalformedStoragePayload(GemchatError):
    """Persisted conversation data could not be decoded."""


class StorageError(GemchatError):
    """A storage backend failed to read or write a key."""


class RevealInProgressError(GemchatError):
    """A reveal is already running for the target message."""

    def __init__(self, message_id: int):
        super().__init__(f"Message {message_id} is already being revealed")
        self.message_id = message_id
