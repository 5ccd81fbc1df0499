import os
from typing import Optional

import yaml

from gerritbot_core.utils.urls import EscapePolicy, quote_value

DEFAULT_CONFIG_PATH = ".gerritbot.yml"

DEFAULT_CONFIG: dict = {
    "approval_types": ["Code-Review", "WaitForVerification", "Verified"],
    "url_escaping": "none",  # "none" keeps query values verbatim, "quote" percent-encodes them
    "bot_markers": ["bot"],  # case-insensitive substrings that mark an author as a bot
}

_ESCAPE_POLICIES: dict[str, Optional[EscapePolicy]] = {
    "none": None,
    "quote": quote_value,
}

_LIST_KEYS = ("approval_types", "bot_markers")


def load_config(config_path: Optional[str] = None, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .gerritbot.yml (or $GERRITBOT_CONFIG) in the current directory
      3. CLI argument overrides
    """
    config = {key: list(value) if isinstance(value, list) else value for key, value in DEFAULT_CONFIG.items()}

    path = config_path or os.environ.get("GERRITBOT_CONFIG") or DEFAULT_CONFIG_PATH
    if os.path.exists(path):
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(file_config).__name__}.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    for key in _LIST_KEYS:
        if not isinstance(config[key], list):
            raise ValueError(f"Config key {key!r} must be a list, got {config[key]!r}.")
    get_escape_policy(config)

    return config


def get_escape_policy(config: dict) -> Optional[EscapePolicy]:
    """Map ``url_escaping`` to the escape callable passed to the formatter."""
    name = config.get("url_escaping", "none")
    if name not in _ESCAPE_POLICIES:
        raise ValueError(f"Unknown url_escaping policy: {name!r}. Choose 'none' or 'quote'.")
    return _ESCAPE_POLICIES[name]
