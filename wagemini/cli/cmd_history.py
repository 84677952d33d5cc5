"""Conversation history inspection."""

import click
from rich.markup import escape
from rich.table import Table

from . import cli
from .shared import console


@cli.command()
@click.argument("user")
@click.option("--dir", "conversations_dir", default=None, help="Conversations directory (overrides WAGEMINI_CONVERSATIONS_DIR)")
def history(user, conversations_dir):
    """Show the stored conversation for USER (a sender JID or storage key)."""
    from wagemini.communication.inbound import to_storage_key
    from wagemini.config import Settings
    from wagemini.store import ConversationStore, FileRecordStore

    directory = conversations_dir or Settings().conversations_dir
    key = to_storage_key(user)
    turns = ConversationStore(FileRecordStore(directory)).load(key)

    if not turns:
        console.print(f"[yellow]No conversation stored for {key}[/yellow]")
        return

    table = Table(title=f"Conversation {key} ({len(turns)} turns)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Role", style="cyan")
    table.add_column("Content")
    for i, turn in enumerate(turns, 1):
        table.add_row(str(i), turn.role, escape(turn.content))
    console.print(table)
