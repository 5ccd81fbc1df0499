"""Per-event formatting errors.

Each error means a single event cannot be turned into a message. Callers
formatting many events catch ``FormatError`` at the event boundary, log it,
and move on to the next event.
"""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for events the formatter cannot render."""


class MalformedUrlError(FormatError):
    """The change URL has no ``/`` to derive the Gerrit base URL from."""

    def __init__(self, url: str):
        super().__init__(f"Cannot derive Gerrit base URL from {url!r}: no '/' separator.")
        self.url = url


InvalidUrlError = MalformedUrlError


class MalformedApprovalValueError(FormatError):
    """The approval value is not an integer."""

    def __init__(self, approval_type: str, value: str):
        super().__init__(f"Approval {approval_type!r} has a non-integer value: {value!r}.")
        self.approval_type = approval_type
        self.value = value


class MissingUserIdentifierError(FormatError):
    """The user cannot be referenced: no display text or no email to query by."""

    def __init__(self, reason: str):
        super().__init__(f"Cannot format user: {reason}.")
