"""Typer entry points for gemchat."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..chat import ConversationStore, rank_models
from .providers import get_controller, get_llm, get_selector, get_storage

# GEMINI_API_KEY and GEMCHAT_* settings may come from a .env file
load_dotenv()

app = typer.Typer(
    name="gemchat",
    help="Terminal chat client for Gemini with persistent conversations",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

STORAGE_OPTION = typer.Option(
    None,
    "--storage",
    help="Conversation storage: 'sqlite' (persistent) or 'memory' (session-only)"
)
DB_PATH_OPTION = typer.Option(
    None,
    "--db-path",
    help="Path for the SQLite database (only with --storage sqlite)"
)


@app.command()
def chat(
    storage_backend: str | None = STORAGE_OPTION,
    db_path: str | None = DB_PATH_OPTION,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Start the interactive chat UI."""
    async def _chat():
        from ..ui import run_chat_tui

        llm = get_llm(console)
        storage = get_storage(storage_backend, db_path)
        try:
            await run_chat_tui(
                controller=get_controller(llm, storage),
                selector=get_selector(llm),
                storage=storage,
                log_level=log_level,
            )
        finally:
            await llm.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def models():
    """Show candidate models in selection order."""
    async def _models():
        llm = get_llm(console)
        selector = get_selector(llm)
        try:
            listed = await llm.list_models()
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await llm.close()

        ranked = rank_models(listed, family=selector.family, capability=selector.capability)
        if not ranked:
            console.print("[yellow]No eligible models found[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Rank", style="dim", width=4)
        table.add_column("Model", style="cyan")
        table.add_column("Version", style="green")
        for i, model in enumerate(ranked, 1):
            table.add_row(str(i), model.short_name, model.version or "-")
        console.print(table)
        console.print(f"[dim]Selected: {ranked[0].short_name}[/dim]")

    asyncio.run(_models())


@app.command()
def history(
    storage_backend: str | None = STORAGE_OPTION,
    db_path: str | None = DB_PATH_OPTION,
):
    """List saved conversations."""
    async def _history():
        async with get_storage(storage_backend, db_path) as storage:
            conversations = await ConversationStore(storage).load()

        if not conversations:
            console.print("[yellow]No saved conversations[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Messages", style="green", justify="right")
        table.add_column("Updated", style="yellow")
        for conversation in conversations:
            updated = conversation.updated_at.astimezone().strftime("%Y-%m-%d %H:%M")
            table.add_row(
                str(conversation.id),
                conversation.title,
                str(len(conversation.messages)),
                updated,
            )
        console.print(table)

    asyncio.run(_history())


@app.command()
def delete(
    conversation_id: int = typer.Argument(..., help="Conversation ID (see 'gemchat history')"),
    storage_backend: str | None = STORAGE_OPTION,
    db_path: str | None = DB_PATH_OPTION,
):
    """Delete a saved conversation."""
    async def _delete():
        async with get_storage(storage_backend, db_path) as storage:
            store = ConversationStore(storage)
            await store.load()
            removed = await store.remove(conversation_id)

        if not removed:
            console.print(f"[red]Error: conversation {conversation_id} not found[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]Deleted conversation {conversation_id}[/green]")
        if not store.conversations:
            console.print(
                "[dim]That was the last conversation; stored data is kept until a new one is saved.[/dim]"
            )

    asyncio.run(_delete())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
