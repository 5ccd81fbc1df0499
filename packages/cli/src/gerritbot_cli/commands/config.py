"""config command: show the effective configuration."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.command("config")
@click.pass_context
def config_cmd(ctx):
    """Show the configuration gerritbot will format events with.

    Values come from the built-in defaults, overridden by the config file.
    """
    config = ctx.obj["config"]

    table = Table(title=f"gerritbot config: {ctx.obj['config_path']}", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    for key in sorted(config):
        value = config[key]
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value) or "-"
        table.add_row(key, str(value))

    console.print(table)
