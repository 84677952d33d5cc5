"""Start command."""

import asyncio
import click

from . import cli
from .shared import console


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--host", default=None, help="Bind host (overrides WAGEMINI_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (overrides WAGEMINI_PORT)")
def start(debug, host, port):
    """Start the webhook server."""
    from wagemini.config import load_settings
    from wagemini.main import run

    settings = load_settings()
    updates = {}
    if debug:
        updates["debug"] = True
    if host:
        updates["host"] = host
    if port:
        updates["port"] = port
    if updates:
        settings = settings.model_copy(update=updates)

    console.print(f"[bold blue]Starting wagemini on {settings.host}:{settings.port}...[/bold blue]")
    asyncio.run(run(settings))
