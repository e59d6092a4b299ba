"""log command — parse a stream of commit messages."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TextIO

import click
from rich.console import Console

from commitlens_cli.render import record_to_json
from commitlens_core.errors import ConfigurationError, InputError
from commitlens_core.stream import DEFAULT_HIGH_WATER_MARK, parse_commits

err_console = Console(stderr=True)

_READ_SIZE = 64 * 1024


def split_messages(stream: TextIO, separator: str) -> Iterator[str]:
    """Yield the separator-delimited messages in ``stream`` without reading it all at once.

    A trailing separator does not produce an extra empty message.
    """
    pending = ""
    while chunk := stream.read(_READ_SIZE):
        pending += chunk
        *complete, pending = pending.split(separator)
        yield from complete
    if pending.strip("\r\n"):
        yield pending


def _non_empty_separator(ctx, param, value: str) -> str:
    if not value:
        raise click.BadParameter("must not be empty.")
    return value


@click.command("log")
@click.argument("log_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--separator",
    default="\0",
    callback=_non_empty_separator,
    show_default="NUL",
    help="Text separating one message from the next (NUL matches `git log -z`).",
)
@click.option(
    "--lenient",
    is_flag=True,
    help="Emit a placeholder for empty messages instead of stopping.",
)
@click.pass_context
def log_cmd(ctx, log_file, separator: str, lenient: bool):
    """Parse every message in LOG_FILE (default: stdin), one JSON object per line.

    \b
    Example:
      git log -z --format='%B%n-hash-%n%H' | commitlens log
    """
    config = ctx.obj["config"]
    options = ctx.obj["options"]

    warned = []

    def warn(error: InputError) -> None:
        warned.append(error)
        err_console.print(f"[yellow]Skipping an empty message: {error}[/yellow]")

    try:
        records = parse_commits(
            split_messages(log_file, separator),
            options,
            warn=warn if lenient else None,
            high_water_mark=config.get("high_water_mark", DEFAULT_HIGH_WATER_MARK),
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    count = 0
    try:
        for record in records:
            click.echo(record_to_json(record))
            count += 1
    except InputError as e:
        raise click.UsageError(f"Message {count + 1} is empty: {e}. Use --lenient to skip empty messages.") from e

    if warned:
        err_console.print(f"[yellow]{len(warned)} empty message(s) replaced by placeholders.[/yellow]")
