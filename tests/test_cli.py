"""Tests for the command-line entry points."""
import asyncio

import pytest
from typer.testing import CliRunner

from gemchat.chat import ConversationStore, Message, Sender
from gemchat.cli.app import app
from gemchat.cli.providers import get_storage
from gemchat.storage.in_memory import InMemoryStorage
from gemchat.storage.sqlite import SQLiteStorage

runner = CliRunner()


def _seed(path, *titles: str) -> list[int]:
    async def _write():
        async with SQLiteStorage(path) as storage:
            store = ConversationStore(storage)
            ids = []
            for title in titles:
                conversation = await store.commit_turn(
                    None,
                    [
                        Message(id=1, sender=Sender.USER, text=title),
                        Message(id=2, sender=Sender.ASSISTANT, text="reply"),
                    ],
                )
                ids.append(conversation.id)
            return ids

    return asyncio.run(_write())


class TestStorageOptions:
    """Tests for get_storage."""

    def test_memory_backend(self):
        assert isinstance(get_storage("memory"), InMemoryStorage)

    def test_sqlite_path_argument(self, tmp_path):
        storage = get_storage("sqlite", str(tmp_path / "c.db"))
        assert isinstance(storage, SQLiteStorage)
        assert storage.db_path == tmp_path / "c.db"

    def test_environment_selects_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GEMCHAT_STORAGE", "sqlite")
        monkeypatch.setenv("GEMCHAT_DB_PATH", str(tmp_path / "env.db"))
        assert get_storage().db_path == tmp_path / "env.db"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_storage("redis")


class TestHistoryCommand:
    """Tests for 'gemchat history'."""

    def test_empty_database(self, tmp_path):
        result = runner.invoke(app, ["history", "--db-path", str(tmp_path / "c.db")])
        assert result.exit_code == 0
        assert "No saved conversations" in result.output

    def test_lists_saved_conversations(self, tmp_path):
        path = tmp_path / "c.db"
        ids = _seed(path, "hello", "weather")

        result = runner.invoke(app, ["history", "--db-path", str(path)])

        assert result.exit_code == 0
        assert "hello..." in result.output
        assert "weather..." in result.output
        assert str(ids[0]) in result.output


class TestDeleteCommand:
    """Tests for 'gemchat delete'."""

    def test_deletes_conversation(self, tmp_path):
        path = tmp_path / "c.db"
        keep, drop = _seed(path, "keep", "drop")

        result = runner.invoke(app, ["delete", str(drop), "--db-path", str(path)])

        assert result.exit_code == 0
        assert f"Deleted conversation {drop}" in result.output

        async def _reload():
            async with SQLiteStorage(path) as storage:
                return await ConversationStore(storage).load()

        assert [c.id for c in asyncio.run(_reload())] == [keep]

    def test_unknown_id_fails(self, tmp_path):
        path = tmp_path / "c.db"
        _seed(path, "only")

        result = runner.invoke(app, ["delete", "99", "--db-path", str(path)])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_deleting_last_conversation_warns(self, tmp_path):
        path = tmp_path / "c.db"
        (only,) = _seed(path, "only")

        result = runner.invoke(app, ["delete", str(only), "--db-path", str(path)])

        assert result.exit_code == 0
        assert "last conversation" in result.output


class TestModelsCommand:
    """Tests for 'gemchat models'."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        result = runner.invoke(app, ["models"])
        assert result.exit_code == 1
        assert "GEMINI_API_KEY" in result.output
