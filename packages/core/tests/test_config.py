"""Tests for configuration loading."""

import pytest

from gerritbot_core.config import get_escape_policy, load_config
from gerritbot_core.utils.urls import quote_value


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["approval_types"] == ["Code-Review", "WaitForVerification", "Verified"]
    assert config["url_escaping"] == "none"
    assert config["bot_markers"] == ["bot"]


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("approval_types:\n  - Code-Review\n  - Library-Compliance\nurl_escaping: quote\n")
    config = load_config(config_path=str(cfg))
    assert config["approval_types"] == ["Code-Review", "Library-Compliance"]
    assert config["url_escaping"] == "quote"
    assert config["bot_markers"] == ["bot"]


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["url_escaping"] == "none"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("url_escaping: quote\n")
    config = load_config(config_path=str(cfg), cli_overrides={"url_escaping": "none"})
    assert config["url_escaping"] == "none"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("url_escaping: quote\n")
    config = load_config(config_path=str(cfg), cli_overrides={"url_escaping": None})
    assert config["url_escaping"] == "quote"


def test_config_path_from_env(tmp_path, monkeypatch):
    cfg = tmp_path / "custom.yml"
    cfg.write_text("bot_markers:\n  - jenkins\n")
    monkeypatch.setenv("GERRITBOT_CONFIG", str(cfg))
    config = load_config()
    assert config["bot_markers"] == ["jenkins"]


def test_unknown_escaping_policy_raises(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("url_escaping: html\n")
    with pytest.raises(ValueError, match="url_escaping"):
        load_config(config_path=str(cfg))


def test_non_list_approval_types_raises(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("approval_types: Code-Review\n")
    with pytest.raises(ValueError, match="approval_types"):
        load_config(config_path=str(cfg))


def test_non_mapping_config_file_raises(tmp_path):
    cfg = tmp_path / ".gerritbot.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(config_path=str(cfg))


def test_escape_policy_mapping():
    assert get_escape_policy({"url_escaping": "none"}) is None
    assert get_escape_policy({"url_escaping": "quote"}) is quote_value


def test_default_lists_are_not_shared_reference(tmp_path):
    """Mutating one config's lists must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["bot_markers"].append("jenkins")
    assert config_b["bot_markers"] == ["bot"]
