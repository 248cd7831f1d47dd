"""Reply cleanup for plain-text display.

Hides the rules for stripping markdown and markup from model replies.
"""

import re

_EMPHASIS = re.compile(r"\*\*|__")
_HEADING = re.compile(r"^#+\s+", re.MULTILINE)
_TAG = re.compile(r"</?[^>]+(?:>|\Z)")


def _strip_once(text: str) -> str:
    text = _EMPHASIS.sub("", text)
    text = _HEADING.sub("", text)
    text = _TAG.sub("", text)
    return text.strip()


def format_response(raw: str | None) -> str:
    """Strip emphasis markers, heading markers and HTML-like tags.

    Removing one marker can expose another (``"*<i>*"`` becomes ``"**"``),
    so passes repeat until the text is stable. Each pass either shortens
    the text or leaves it unchanged, which makes the result idempotent.

    Args:
        raw: Raw reply text, possibly empty or None

    Returns:
        Cleaned text with surrounding whitespace trimmed
    """
    if not raw:
        return ""
    text = raw
    while True:
        cleaned = _strip_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
