"""Build result correlation: write a finished build's report back to its PR.

One call walks ReceiveEvent, ValidateStatus, DecodeIdentifiers,
FetchArtifacts, RenderReport, LocateComment and UpdateComment in order. Any
failure raises out of the call before the comment is touched, so the comment
either shows the full report or stays as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from runbot_core.aws.artifacts import ArtifactStore
from runbot_core.aws.session import make_client
from runbot_core.errors import BuildStatusError, CorrelationError
from runbot_core.events import (
    STATUS_SUCCEEDED,
    correlation_metadata,
    parse_artifact_location,
    parse_build_id,
    parse_event,
)
from runbot_core.gh.threads import get_comments, get_issue, get_repo, user_login
from runbot_core.report import fetch_bundle, find_token, render_report, reindent_status, suite_status

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Outcome of one correlated build, for the CLI to record history."""

    repo: str
    pr_number: int
    token: str
    build_id: str
    comment_id: int
    test_status: str
    reindent_status: str
    updated: bool  # False when the comment already showed this report
    reported_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def find_result_comment(comments, bot_login: str, token: str):
    """Return the bot comment carrying ``token``'s marker, or None."""
    for comment in comments:
        if user_login(comment) == bot_login and find_token(comment.body) == token:
            return comment
    return None


def handle_build_event(detail: dict, client, config: dict, s3_client=None) -> BuildReport:
    """Report one completed build on the pull request that requested it.

    ``detail`` is the event's ``detail`` object. ``s3_client`` defaults to a
    boto3 client in the build's region.
    """
    event = parse_event(detail)
    logger.info("Build result: id=%s status=%s", event.build_id, event.status)

    if event.status != STATUS_SUCCEEDED:
        raise BuildStatusError(event.build_id, event.status)

    build = parse_build_id(event.build_id)
    location = parse_artifact_location(event.artifact_location)
    meta = correlation_metadata(event)

    if s3_client is None:
        s3_client = make_client("s3", build.region)
    bundle = fetch_bundle(ArtifactStore(s3_client, location.bucket, location.prefix))

    body = render_report(bundle, build.build_uuid, meta.token)
    logger.debug("Result %s", body)

    logger.info("Search for original pr: %s %d", meta.repo, meta.pr_number)
    issue = get_issue(get_repo(client, meta.repo), meta.pr_number)
    comments = get_comments(issue)
    logger.info("Found %d comments", len(comments))

    comment = find_result_comment(comments, config["bot_login"], meta.token)
    if comment is None:
        raise CorrelationError(
            f"Failed to find original bot comment for token {meta.token} on {meta.repo}#{meta.pr_number}"
        )

    updated = comment.body != body
    if updated:
        comment.edit(body)
        logger.info("Updated comment %s with result of build %s", comment.id, build.build_uuid)
    else:
        logger.info("Comment %s already shows build %s, nothing to do", comment.id, build.build_uuid)

    return BuildReport(
        repo=meta.repo,
        pr_number=meta.pr_number,
        token=meta.token,
        build_id=event.build_id,
        comment_id=comment.id,
        test_status=suite_status(bundle.test_exit_code),
        reindent_status=reindent_status(bundle.reindent_exit_code),
        updated=updated,
    )
