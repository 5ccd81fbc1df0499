"""Turn Gerrit approval events into chat messages.

A message looks like::

    [Fix bug](url) ([core](.../q/project:core+status:open)) 👍 +2 (Code-Review) from [Alice](...)

    > Looks good

followed by the relevant comment lines quoted with ``> ``. ``format_approval``
returns ``None`` when an approval should not be announced at all.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable

from gerritbot_core.errors import FormatError, MalformedApprovalValueError, MissingUserIdentifierError
from gerritbot_core.models import Approval, Change, Event, User
from gerritbot_core.utils.urls import EscapePolicy, format_link, format_query_link, get_base_url

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_TYPES = frozenset({"Code-Review", "WaitForVerification", "Verified"})
DEFAULT_BOT_MARKERS = ("bot",)

HOURGLASS = "⌛"
THUMBS_UP = "👍"
MEMO = "📝"
THUMBS_DOWN = "👎"

_LINE_RE = re.compile(r"[^\r\n]+")
_COMMENT_COUNT_RE = re.compile(r"\([0-9]+ comments?\)")

LINE_SEPARATOR = "<br>\n"


def format_user(base_url: str, user: User, role: str, *, escape: EscapePolicy | None = None) -> str:
    """Link a user to the open changes they are ``role`` on (e.g. ``reviewer``).

    Service accounts often have no email; they are searched by username, or
    by name when that is all there is.
    """
    text = user.name or user.email
    if not text:
        raise MissingUserIdentifierError("user has neither a name nor an email")
    ident = user.email or user.username or user.name
    return format_query_link(base_url, text, "%s:%s+status:open", role, ident, escape=escape)


def format_change_subject(change: Change) -> str:
    return format_link(change.subject, change.url)


def format_change_project(base_url: str, change: Change, *, escape: EscapePolicy | None = None) -> str:
    """Project link, then the branch when it is not master, then the topic link."""
    result = format_query_link(base_url, change.project, "project:%s+status:open", change.project, escape=escape)

    if change.branch != "master":
        result += ", branch:" + change.branch

    if change.topic:
        result += ", topic:" + format_query_link(
            base_url, change.topic, "topic:%s+status:open", change.topic, escape=escape
        )

    return result


# ---------------------------------------------------------------------------
# Comment filtering
# ---------------------------------------------------------------------------


def is_patch_set_line(line: str) -> bool:
    """Gerrit prefixes every review comment with ``Patch Set N: <votes>``."""
    return line.startswith("Patch Set")


def is_comment_count_line(line: str) -> bool:
    """Lines like ``(3 comments)`` that only count inline comments."""
    return _COMMENT_COUNT_RE.search(line) is not None


def is_failure_line(line: str) -> bool:
    return "FAILURE" in line


def classify_line(line: str, is_human: bool) -> str | None:
    """Return ``"human"``, ``"failure"`` or ``None`` (dropped) for one comment line."""
    if is_human and not is_patch_set_line(line) and not is_comment_count_line(line):
        return "human"
    if is_failure_line(line):
        return "failure"
    return None


def select_comment_lines(comment: str, is_human: bool) -> list[str]:
    """Quote the lines of ``comment`` worth showing in chat, in their original order.

    Blank lines are skipped; any of ``\\r``, ``\\n`` or ``\\r\\n`` ends a line.
    """
    return ["> " + line for line in _LINE_RE.findall(comment) if classify_line(line, is_human) is not None]


# ---------------------------------------------------------------------------
# Message assembly
# ---------------------------------------------------------------------------


def parse_approval_value(approval: Approval) -> int:
    try:
        return int(approval.value)
    except (TypeError, ValueError):
        raise MalformedApprovalValueError(approval.type, approval.value) from None


def approval_icon(approval_type: str, value: int) -> str:
    if "WaitForVerification" in approval_type:
        return HOURGLASS
    if value > 0:
        return THUMBS_UP
    if value == 0:
        return MEMO
    return THUMBS_DOWN


def format_approval(
    event: Event,
    approval: Approval,
    is_human: bool,
    *,
    approval_types: Iterable[str] = DEFAULT_APPROVAL_TYPES,
    escape: EscapePolicy | None = None,
) -> str | None:
    """Format one approval of ``event`` as a chat message, or return None to suppress it.

    Raises a ``FormatError`` subclass when the event is malformed; nothing is
    returned for it in that case.
    """
    if approval.type not in approval_types:
        return None

    change = event.change
    base_url = get_base_url(change.url)

    msg = format_change_subject(change) + " (" + format_change_project(base_url, change, escape=escape) + ")"

    value = parse_approval_value(approval)
    icon = approval_icon(approval.type, value)
    sign = "+" if value > 0 else ""

    msg += f" {icon} {sign}{value} ({approval.type})"
    msg += " from " + format_user(base_url, event.author, "reviewer", escape=escape)

    lines = select_comment_lines(event.comment, is_human)
    if not lines:
        return msg
    return msg + "\n\n" + LINE_SEPARATOR.join(lines)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def is_human_author(user: User, bot_markers: Iterable[str] = DEFAULT_BOT_MARKERS) -> bool:
    """Return False for CI/bot accounts, judged by username, then name, then email.

    Markers match whole words only: ``ci-bot`` and ``Build Bot`` are bots,
    ``Talbot`` is not.
    """
    ident = (user.username or user.name or user.email or "").lower()
    return not any(
        re.search(r"(?<![a-z0-9])" + re.escape(marker.lower()) + r"(?![a-z0-9])", ident) for marker in bot_markers
    )


def format_event(
    event: Event,
    *,
    is_human: bool | None = None,
    approval_types: Iterable[str] = DEFAULT_APPROVAL_TYPES,
    escape: EscapePolicy | None = None,
    bot_markers: Iterable[str] = DEFAULT_BOT_MARKERS,
) -> list[str]:
    """Format every approval on ``event``; suppressed approvals are left out.

    ``is_human`` defaults to what ``is_human_author`` says about the author.
    """
    if is_human is None:
        is_human = is_human_author(event.author, bot_markers)
    approval_types = frozenset(approval_types)

    messages = []
    for approval in event.approvals:
        msg = format_approval(event, approval, is_human, approval_types=approval_types, escape=escape)
        if msg is None:
            logger.debug("Suppressed %s approval on %s", approval.type, event.change.url)
            continue
        messages.append(msg)
    return messages


def format_events(
    events: Iterable[Event],
    *,
    is_human: bool | None = None,
    approval_types: Iterable[str] = DEFAULT_APPROVAL_TYPES,
    escape: EscapePolicy | None = None,
    bot_markers: Iterable[str] = DEFAULT_BOT_MARKERS,
    on_error: Callable[[Event, FormatError], None] | None = None,
) -> list[str]:
    """Format a batch of events. A malformed event is logged and skipped as a whole.

    ``on_error`` is called with each skipped event and its error.
    """
    approval_types = frozenset(approval_types)
    bot_markers = tuple(bot_markers)

    messages: list[str] = []
    for event in events:
        try:
            messages.extend(
                format_event(
                    event,
                    is_human=is_human,
                    approval_types=approval_types,
                    escape=escape,
                    bot_markers=bot_markers,
                )
            )
        except FormatError as e:
            logger.warning("Skipping event for %s (%s): %s", event.change.url, type(e).__name__, e)
            if on_error is not None:
                on_error(event, e)
    return messages
