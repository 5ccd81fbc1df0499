"""format command: turn Gerrit events into chat messages."""

from __future__ import annotations

import json
import logging

import click
from rich.console import Console

from gerritbot_core.config import get_escape_policy
from gerritbot_core.formatter import format_events
from gerritbot_core.models import Event

console = Console(stderr=True)
logger = logging.getLogger(__name__)

_COMMENT_ADDED = "comment-added"


def _read_events(stream):
    """Yield ``(line_number, event, problem)`` for every comment-added record in ``stream``.

    ``event`` is None and ``problem`` says why when a record cannot be mapped.
    """
    for line_number, raw in enumerate(stream, start=1):
        raw = raw.strip()
        if not raw:
            continue
        try:
            record = json.loads(raw)
        except json.JSONDecodeError as e:
            yield line_number, None, f"invalid JSON: {e}"
            continue
        if not isinstance(record, dict):
            yield line_number, None, "record is not a JSON object"
            continue
        if record.get("type", _COMMENT_ADDED) != _COMMENT_ADDED:
            logger.debug("Line %d: ignoring %s event", line_number, record["type"])
            continue
        try:
            yield line_number, Event.from_dict(record), None
        except (KeyError, TypeError, AttributeError) as e:
            yield line_number, None, f"missing or malformed field: {e}"


@click.command("format")
@click.argument("events_file", type=click.File("r", encoding="utf-8", errors="replace"), default="-")
@click.option(
    "--human/--bot",
    "is_human",
    default=None,
    help="Treat every author as a human (quote all comment lines) or as a bot "
    "(quote FAILURE lines only). Default: decide per author from bot_markers.",
)
@click.pass_context
def format_cmd(ctx, events_file, is_human: bool | None):
    """Print one chat message per tracked approval in EVENTS_FILE.

    EVENTS_FILE holds one Gerrit event per line, as printed by
    `ssh gerrit stream-events`. Reads stdin when omitted. Events that are not
    comment-added are ignored; malformed events are skipped with a warning.
    """
    config = ctx.obj["config"]

    events = []
    skipped = []
    for line_number, event, problem in _read_events(events_file):
        if event is None:
            logger.warning("Line %d: skipping record, %s", line_number, problem)
            skipped.append(line_number)
            continue
        events.append(event)

    messages = format_events(
        events,
        is_human=is_human,
        approval_types=config["approval_types"],
        escape=get_escape_policy(config),
        bot_markers=config["bot_markers"],
        on_error=lambda event, error: skipped.append(event),
    )
    for msg in messages:
        click.echo(msg)
        click.echo()

    console.print(f"Formatted {len(messages)} message(s).", highlight=False)
    if skipped:
        console.print(f"[yellow]Skipped {len(skipped)} malformed event(s).[/yellow]", highlight=False)
