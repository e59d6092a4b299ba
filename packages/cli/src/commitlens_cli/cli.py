"""CLI entry point for commitlens.

Commands:
  parse   — parse a single commit message and print the structured record
  log     — parse a stream of messages (e.g. `git log -z --format=%B`)
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from commitlens_cli.commands.log import log_cmd
from commitlens_cli.commands.parse import parse_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("commitlens"),
    prog_name="commitlens",
)
@click.option(
    "--config",
    "config_path",
    default=".commitlens.yml",
    show_default=True,
    help="Path to the grammar configuration file.",
    envvar="COMMITLENS_CONFIG",
)
@click.option("--debug", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, debug: bool):
    """Parse commit messages into structured records."""
    from commitlens_core.config import load_config, options_from_config
    from commitlens_core.errors import ConfigurationError

    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
        options = options_from_config(config)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    ctx.obj["config"] = config
    ctx.obj["options"] = options


main.add_command(parse_cmd)
main.add_command(log_cmd)
