"""Build history data models.

Decoupled from runbot_core so the store layer can be used independently
and runbot_core has no knowledge of persistence concerns.
"""

from __future__ import annotations

from dataclasses import dataclass

DISPATCHED = "dispatched"
REPORTED = "reported"


@dataclass
class BuildRecord:
    """One step in the life of a bot build, persisted to the store.

    The CLI writes a "dispatched" record after a scan starts a build and a
    "reported" record after the result comment is written. Both share the
    correlation token, which is how the two are matched up again.
    """

    repo: str
    pr_number: int
    token: str
    event: str  # "dispatched" | "reported"
    build_id: str
    recorded_at: str  # ISO-8601 UTC timestamp
    comment_id: int | None = None
    status: str = ""  # e.g. "Pass/Ok" for reported builds
