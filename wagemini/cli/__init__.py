"""wagemini CLI — command line interface."""

import click
from wagemini import __version__
from .shared import console


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="wagemini")
@click.pass_context
def cli(ctx):
    """wagemini — WhatsApp assistant powered by Gemini"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Import command modules to register them with the cli group
from . import cmd_start  # noqa: E402, F401
from . import cmd_history  # noqa: E402, F401
from . import cmd_split  # noqa: E402, F401


def main():
    cli()
