"""Provider factory functions for CLI.

Centralizes creation of storage, LLM and chat session instances from
environment variables. Hides configuration details from command
implementations.
"""

import os
from pathlib import Path

from rich.console import Console

from ..chat import ChatSessionController, ConversationStore, ModelSelector, TypewriterRevealer
from ..chat.config import MODEL_FAMILY, REQUEST_TIMEOUT_SECONDS, REVEAL_BASE_DELAY, REVEAL_JITTER
from ..llm import LLMProvider, create_llm_provider
from ..storage import KeyValueStorage, create_storage

DEFAULT_DB_PATH = Path.home() / ".gemchat" / "conversations.db"

# Default console for output
_console = Console()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw)


def get_storage(backend: str | None = None, path: str | None = None) -> KeyValueStorage:
    """Create storage backend from arguments or environment variables.

    Environment variables:
        GEMCHAT_STORAGE: 'sqlite' (default) or 'memory'
        GEMCHAT_DB_PATH: SQLite file (default: ~/.gemchat/conversations.db)
    """
    backend = (backend or os.getenv("GEMCHAT_STORAGE", "sqlite")).lower()
    if backend == "sqlite":
        db_path = path or os.getenv("GEMCHAT_DB_PATH") or str(DEFAULT_DB_PATH)
        return create_storage("sqlite", path=db_path)
    return create_storage(backend)


def get_llm(console: Console | None = None) -> LLMProvider:
    """Create the Gemini provider from environment variables.

    Raises:
        SystemExit: If GEMINI_API_KEY is not set

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required)
    """
    import typer

    con = console or _console
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        con.print("[red]Error: GEMINI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return create_llm_provider("gemini", api_key=api_key)


def get_selector(llm: LLMProvider) -> ModelSelector:
    """Create the startup model selector.

    Environment variables:
        GEMCHAT_MODEL_FAMILY: substring a model name must contain (default: gemini)
    """
    return ModelSelector(llm, family=os.getenv("GEMCHAT_MODEL_FAMILY", MODEL_FAMILY))


def get_controller(llm: LLMProvider, storage: KeyValueStorage) -> ChatSessionController:
    """Create the chat session controller.

    Environment variables:
        GEMCHAT_REVEAL_DELAY: base pause between revealed words in seconds
        GEMCHAT_REVEAL_JITTER: extra random pause bound in seconds
        GEMCHAT_REQUEST_TIMEOUT: completion timeout in seconds (0 disables)
    """
    timeout = _float_env("GEMCHAT_REQUEST_TIMEOUT", REQUEST_TIMEOUT_SECONDS)
    revealer = TypewriterRevealer(
        base_delay=_float_env("GEMCHAT_REVEAL_DELAY", REVEAL_BASE_DELAY),
        jitter=_float_env("GEMCHAT_REVEAL_JITTER", REVEAL_JITTER),
    )
    return ChatSessionController(
        provider=llm,
        store=ConversationStore(storage),
        revealer=revealer,
        request_timeout=timeout or None,
    )
