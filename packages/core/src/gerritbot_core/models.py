"""Gerrit event records consumed by the formatter.

The records mirror the shape of Gerrit's ``comment-added`` stream event after
it has been decoded from JSON. ``from_dict`` maps a decoded object onto the
records; it does not read bytes or talk to Gerrit. A missing required key
raises ``KeyError`` and a value of the wrong type raises ``TypeError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


def _mapping(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _optional_text(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class User:
    """A Gerrit account as it appears in an event."""

    name: str | None = None
    email: str | None = None
    username: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> User:
        data = _mapping(data, "author")
        return cls(
            name=_optional_text(data, "name"),
            email=_optional_text(data, "email"),
            username=_optional_text(data, "username"),
        )


@dataclass(frozen=True)
class Change:
    url: str
    subject: str
    project: str
    branch: str
    topic: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Change:
        data = _mapping(data, "change")
        return cls(
            url=_text(data, "url"),
            subject=_text(data, "subject"),
            project=_text(data, "project"),
            branch=_text(data, "branch"),
            topic=_optional_text(data, "topic"),
        )


@dataclass(frozen=True)
class Approval:
    """A single label vote, e.g. ``Code-Review +2``.

    ``value`` stays text exactly as Gerrit sends it; the formatter parses it.
    """

    type: str
    value: str
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Approval:
        data = _mapping(data, "approval")
        return cls(
            type=_text(data, "type"),
            value=str(data["value"]),
            description=_optional_text(data, "description"),
        )


@dataclass(frozen=True)
class Event:
    """A ``comment-added`` event: who commented on which change, and how they voted."""

    change: Change
    author: User
    comment: str = ""
    approvals: tuple[Approval, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict) -> Event:
        data = _mapping(data, "event")
        approvals = data.get("approvals") or []
        if not isinstance(approvals, list):
            raise TypeError(f"'approvals' must be a list, got {type(approvals).__name__}")
        return cls(
            change=Change.from_dict(data["change"]),
            author=User.from_dict(data.get("author") or {}),
            comment=_optional_text(data, "comment") or "",
            approvals=tuple(Approval.from_dict(a) for a in approvals),
        )
