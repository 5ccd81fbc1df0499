"""Gerrit URL and markdown link helpers.

Query values are interpolated verbatim by default, which is what existing
chat messages look like. Pass ``escape=quote_value`` (or set
``url_escaping: quote`` in the config) to percent-encode them instead.
"""

from __future__ import annotations

from typing import Callable
from urllib.parse import quote

from gerritbot_core.errors import MalformedUrlError

EscapePolicy = Callable[[str], str]


def get_base_url(change_url: str) -> str:
    """Return the Gerrit base URL, i.e. ``change_url`` cut at its last ``/``.

    ``http://review.example.com/1234`` → ``http://review.example.com``
    """
    if "/" not in change_url:
        raise MalformedUrlError(change_url)
    return change_url.rsplit("/", 1)[0]


def quote_value(value: str) -> str:
    return quote(str(value), safe="")


def get_query_url(base_url: str, query: str, *args, escape: EscapePolicy | None = None) -> str:
    """Build ``{base_url}/q/{query % args}``.

    ``escape`` is applied to each argument, never to the query template.
    """
    if escape is not None:
        args = tuple(escape(str(arg)) for arg in args)
    return "%s/q/%s" % (base_url, query % args)


def format_link(text: str, target: str) -> str:
    return f"[{text}]({target})"


def format_query_link(base_url: str, text: str, query: str, *args, escape: EscapePolicy | None = None) -> str:
    return format_link(text, get_query_url(base_url, query, *args, escape=escape))
