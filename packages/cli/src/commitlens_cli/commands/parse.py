"""parse command — parse one commit message."""

from __future__ import annotations

import click
from rich.console import Console

from commitlens_cli.render import print_record
from commitlens_core.errors import ConfigurationError, InputError
from commitlens_core.grammar import compile_grammar
from commitlens_core.parser import parse_commit

console = Console()


@click.command("parse")
@click.argument("message_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "table"]),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.pass_context
def parse_cmd(ctx, message_file, fmt: str):
    """Parse a commit message from MESSAGE_FILE (default: stdin).

    Works as a commit-msg hook helper: `commitlens parse .git/COMMIT_EDITMSG`.
    """
    options = ctx.obj["options"]
    try:
        grammar = compile_grammar(options)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    try:
        record = parse_commit(message_file.read(), options, grammar)
    except InputError as e:
        raise click.UsageError(f"{e} (the message is empty).") from e

    print_record(console, record, fmt)
