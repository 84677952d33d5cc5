"""Preview how a reply would be chunked."""

import click
from rich.markup import escape
from rich.panel import Panel

from . import cli
from .shared import console


@cli.command()
@click.argument("text")
@click.option("--max-lines", default=3, show_default=True, help="Lines per message")
@click.option("--max-chars", default=100, show_default=True, help="Characters per line")
def split(text, max_lines, max_chars):
    """Show the WhatsApp messages TEXT would be sent as."""
    from wagemini.communication.outbound import split_message

    chunks = split_message(text, max_lines=max_lines, max_chars_per_line=max_chars)
    if not chunks:
        console.print("[yellow]Nothing to send.[/yellow]")
        return
    for i, chunk in enumerate(chunks, 1):
        console.print(Panel(escape(chunk), title=f"Message {i}/{len(chunks)}", expand=False))
