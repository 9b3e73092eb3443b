"""AWS Lambda entry points.

``scan_handler`` runs on a schedule; ``build_result_handler`` receives the
CodeBuild state-change event. Both are stateless: the only thing cached
between invocations of a warm process is the GitHub token.
"""

from __future__ import annotations

import logging
import os

from runbot_core.aws.parameters import fetch_parameter
from runbot_core.aws.session import make_client
from runbot_core.config import load_config
from runbot_core.correlator import handle_build_event
from runbot_core.gh.threads import get_client
from runbot_core.scanner import run_scan

logger = logging.getLogger(__name__)
logging.getLogger().setLevel(logging.INFO)

_token: str | None = None


def _config() -> dict:
    return load_config(os.environ.get("RUNBOT_CONFIG", ".runbot.yml"))


def github_token(config: dict) -> str:
    """Return the GitHub token, fetching it from SSM on first use."""
    global _token
    if _token is None:
        _token = config.get("github_token") or fetch_parameter(config["token_parameter"], config["region"])
    return _token


def scan_handler(event, context):
    config = _config()
    client = get_client(github_token(config))
    dispatched = run_scan(client, config, make_client("codebuild", config["region"]))
    logger.info("Scan finished, %d build(s) started", len(dispatched))
    return {"dispatched": [d.token for d in dispatched]}


def build_result_handler(event, context):
    config = _config()
    client = get_client(github_token(config))
    report = handle_build_event(event.get("detail", event), client, config)
    return {"comment_id": report.comment_id, "updated": report.updated}
