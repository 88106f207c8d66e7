"""msgscan extract command - extract messages from source files."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from msgscan.catalog.models import ExtractionStats
from msgscan.config.loader import load_config
from msgscan.core.errors import MsgScanError, UnsupportedSourceError
from msgscan.core.logging import configure_logging
from msgscan.extractor import MessageExtractor


def _stats_table(stats: ExtractionStats) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column(style="dim")
    table.add_column(justify="right")
    table.add_row("messages", str(stats.messages))
    table.add_row("plural messages", str(stats.plural_messages))
    table.add_row("message usages", str(stats.message_usages))
    table.add_row("contexts", str(stats.contexts))
    table.add_row("parsed files", str(stats.parsed_files))
    table.add_row("files with messages", str(stats.parsed_files_with_messages))
    return table


@click.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: ./msgscan.yaml)",
)
@click.option(
    "--definitions",
    "definitions_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write definitions and call sites as JSON to this file",
)
@click.option("--stats", "show_stats", is_flag=True, help="Print statistics to stderr")
@click.pass_context
def extract_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    config_path: Path | None,
    definitions_path: Path | None,
    show_stats: bool,
) -> None:
    """Extract messages from PATHS and print them as JSON.

    Component files (.svelte, .vue, .html) are skipped with a warning.
    """
    try:
        config = load_config(config_path)
    except MsgScanError as e:
        raise click.ClickException(str(e)) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    if not verbose:
        configure_logging(config=config.logging)

    if not config.extractors and not config.locations:
        raise click.ClickException(
            "No extractors configured. Add an 'extractors' section to msgscan.yaml "
            "or pass one with --config."
        )

    try:
        extractor = MessageExtractor(
            calls=config.call_rules(),
            locations=config.location_rules(),
        )
    except MsgScanError as e:
        raise click.ClickException(str(e)) from e

    for path in paths:
        try:
            extractor.parse_file(path)
        except UnsupportedSourceError as e:
            click.echo(f"Skipping {path}: {e.message}", err=True)
        except MsgScanError as e:
            raise click.ClickException(f"{path}: {e}") from e

    messages = [message.to_dict() for message in extractor.get_messages()]
    click.echo(json.dumps(messages, indent=2, ensure_ascii=False))

    if definitions_path is not None:
        extractor.save_definitions(definitions_path)

    if show_stats:
        Console(stderr=True).print(_stats_table(extractor.get_stats()))
