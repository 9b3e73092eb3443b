from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from runbot_core.scanner import BuildRequest

logger = logging.getLogger(__name__)


def start_build(client, request: BuildRequest) -> str:
    """Submit ``request`` to CodeBuild and return the new build's id ("" if none came back)."""
    resp = client.start_build(
        projectName=request.project_name,
        environmentVariablesOverride=[
            {"name": name, "value": value, "type": "PLAINTEXT"} for name, value in request.environment
        ],
    )
    return (resp.get("build") or {}).get("id", "")
