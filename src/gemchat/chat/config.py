"""Chat core configuration constants.

Centralizes timing, wording, and naming values for the chat session.
"""

# Typewriter pacing: each word is followed by a pause of
# REVEAL_BASE_DELAY + random() * REVEAL_JITTER seconds.
REVEAL_BASE_DELAY = 0.03
REVEAL_JITTER = 0.02

# Remote call timeout in seconds (None waits forever)
REQUEST_TIMEOUT_SECONDS = 60.0

# Model discovery
MODEL_FAMILY = "gemini"
GENERATE_CAPABILITY = "generateContent"

# Conversation titles
TITLE_MAX_LENGTH = 30
TITLE_ELLIPSIS = "..."
DEFAULT_TITLE = "New Chat"

# Storage key holding the whole conversation collection
STORAGE_KEY = "conversations"

# Fixed assistant texts
FALLBACK_REPLY = "I apologize, but I couldn't generate a response."
ERROR_REPLY = "Sorry, an error occurred. Please try again."
