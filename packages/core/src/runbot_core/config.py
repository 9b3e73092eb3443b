import os
from pathlib import Path
from typing import Optional

import yaml

from runbot_core.errors import MalformedInputError

DEFAULT_CONFIG: dict = {
    "repos": ["dominikh/go-mode.el", "psanford/go-mode-hook-test"],
    "trigger_phrase": "@go-mode-bot run",
    "bot_login": "go-mode-bot",
    "authorized_users": ["psanford", "muirrn", "muirmanders", "dominikh"],
    "marker_reaction": "eyes",
    "region": "us-west-2",
    "project_name": "go-mode-tests",
    "token_parameter": "/prod/lambda/go-mode-bot-build-complete/github-token",
    "ack_comment": True,  # the result comment is this acknowledgment, edited in place
    "store": "noop",
    "store_path": ".runbot.db",
}

_LIST_KEYS = ("repos", "authorized_users")


def load_config(config_path: str = ".runbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .runbot.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)
    for key in _LIST_KEYS:
        config[key] = list(DEFAULT_CONFIG[key])

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def parse_repo(full_name: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts."""
    parts = (full_name or "").split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedInputError(f"Repository not in owner/name format: {full_name!r}")
    return parts[0], parts[1]
