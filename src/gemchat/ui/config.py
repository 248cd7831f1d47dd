"""UI configuration constants.

Centralizes wording and display values for the UI module.
"""

import logging

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(level_str: str) -> int:
    """Convert a level name to a logging level. Returns DEBUG if invalid."""
    return LOG_LEVELS.get(level_str.lower(), logging.DEBUG)


# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Message header timestamps (message ids are creation times in ms)
MESSAGE_TIMESTAMP_FORMAT = "%H:%M:%S"

# Empty-session screen
WELCOME_TITLE = "How can I help you today?"
WELCOME_SUBTITLE = "Ask me anything, and I'll do my best to assist you."
SUGGESTED_PROMPTS = (
    "Explain quantum computing",
    "Write a poem about the ocean",
    "Help me plan a trip",
    "Explain how AI works",
)

# Input bar
INPUT_HINT = "Enter to send, Shift+Enter (or Ctrl+J) for new line"
THINKING_TEXT = "Thinking..."

# Sidebar
SIDEBAR_TITLE = "Chats"
