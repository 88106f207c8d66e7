"""msgscan CLI - msgscan command."""

import click

from msgscan.cli.extract import extract_command
from msgscan.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="msgscan")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """msgscan - Extract translatable messages from JavaScript and TypeScript."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(extract_command, name="extract")


if __name__ == "__main__":
    cli()
