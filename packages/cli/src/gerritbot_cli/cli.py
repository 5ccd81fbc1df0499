"""CLI entry point for gerritbot.

Commands:
  format  : turn Gerrit comment-added events (JSON lines) into chat messages
  config  : show the effective configuration
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from gerritbot_cli.commands.config import config_cmd
from gerritbot_cli.commands.format import format_cmd

err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("gerritbot"),
    prog_name="gerritbot",
)
@click.option(
    "--config",
    "config_path",
    default=".gerritbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GERRITBOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output, including suppressed approvals.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Format Gerrit review events as chat messages."""
    from gerritbot_core.config import load_config

    _setup_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


main.add_command(format_cmd)
main.add_command(config_cmd)
