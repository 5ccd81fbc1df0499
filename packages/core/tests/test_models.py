"""Tests for mapping decoded Gerrit events onto records."""

import copy
import dataclasses

import pytest

from gerritbot_core.models import Approval, Change, Event, User

COMMENT_ADDED = {
    "type": "comment-added",
    "change": {
        "project": "core",
        "branch": "master",
        "topic": "perf",
        "id": "I8473b95934b5732ac55d26311a706c9c2bde9940",
        "number": 42,
        "subject": "Fix bug",
        "owner": {"name": "Bob", "email": "bob@x.com", "username": "bob"},
        "url": "https://gerrit.example.com/42",
        "status": "NEW",
    },
    "author": {"name": "Alice", "email": "a@x.com", "username": "alice"},
    "approvals": [
        {"type": "Code-Review", "description": "Code-Review", "value": "2", "oldValue": "0"},
        {"type": "Verified", "description": "Verified", "value": -1},
    ],
    "comment": "Patch Set 3: Code-Review+2\n\nLooks good",
}


def test_event_from_dict():
    event = Event.from_dict(COMMENT_ADDED)
    assert event.change == Change(
        url="https://gerrit.example.com/42",
        subject="Fix bug",
        project="core",
        branch="master",
        topic="perf",
    )
    assert event.author == User(name="Alice", email="a@x.com", username="alice")
    assert event.comment == "Patch Set 3: Code-Review+2\n\nLooks good"
    assert event.approvals[0] == Approval(type="Code-Review", value="2", description="Code-Review")


def test_numeric_approval_value_kept_as_text():
    event = Event.from_dict(COMMENT_ADDED)
    assert event.approvals[1].value == "-1"


def test_optional_fields_default_to_none():
    data = {
        "change": {"url": "https://g/1", "subject": "s", "project": "p", "branch": "master"},
        "author": {"email": "a@x.com"},
    }
    event = Event.from_dict(data)
    assert event.change.topic is None
    assert event.author.name is None
    assert event.author.username is None
    assert event.approvals == ()
    assert event.comment == ""


def test_missing_change_field_raises_key_error():
    with pytest.raises(KeyError):
        Event.from_dict({"change": {"url": "https://g/1"}, "author": {}})


@pytest.mark.parametrize(
    "path, value",
    [
        (("author",), "alice"),
        (("change",), "core"),
        (("change", "url"), 42),
        (("change", "subject"), None),
        (("change", "branch"), ["master"]),
        (("change", "topic"), 3),
        (("author", "username"), 7),
        (("comment",), 5),
        (("approvals",), {"type": "Code-Review"}),
    ],
)
def test_wrong_field_type_raises_type_error(path, value):
    data = copy.deepcopy(COMMENT_ADDED)
    target = data
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    with pytest.raises(TypeError):
        Event.from_dict(data)


def test_non_string_approval_type_raises_type_error():
    data = copy.deepcopy(COMMENT_ADDED)
    data["approvals"][0]["type"] = 1
    with pytest.raises(TypeError):
        Event.from_dict(data)


def test_records_are_immutable():
    event = Event.from_dict(COMMENT_ADDED)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.comment = "changed"
