"""GitHub token resolution for command-line runs.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (GitHub CLI session)
  3. The encrypted SSM parameter the Lambda handlers read, when requested
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token(ssm_parameter: str | None = None, region: str | None = None) -> str | None:
    """Return a GitHub token or None if no valid source is available.

    SSM errors propagate: asking for the parameter and not getting it is a
    configuration problem the user should see.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh missing or hung; fall through.
        pass

    if ssm_parameter:
        from runbot_core.aws.parameters import fetch_parameter

        logger.debug("Resolving GitHub token from ssm parameter %s", ssm_parameter)
        return fetch_parameter(ssm_parameter, region)

    return None
