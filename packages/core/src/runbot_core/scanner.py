"""Trigger scanning: turn "@bot run" comments on pull requests into builds.

The scanner keeps no state of its own. Whether a request was already handled
is reconstructed on every run from GitHub itself: a bot comment after the
request, or the bot's marker reaction on the request.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from runbot_core.aws.codebuild import start_build
from runbot_core.config import parse_repo
from runbot_core.events import ENV_PR, ENV_REPO, ENV_TOKEN, ENV_TRIGGER
from runbot_core.gh.threads import (
    PULL_REQUEST,
    STATE_CLOSED,
    get_comments,
    get_issue,
    get_repo,
    is_authorized,
    issue_number_from_url,
    list_unread_notifications,
    mark_read,
    user_login,
)
from runbot_core.marker import claim, has_marker
from runbot_core.report import token_marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildRequest:
    project_name: str
    environment: tuple[tuple[str, str], ...]


@dataclass
class TriggerDecision:
    """The issue or comment whose request should be built, if any."""

    subject: Optional[object] = None

    @property
    def found(self) -> bool:
        return self.subject is not None

    @property
    def trigger_id(self) -> Optional[int]:
        return self.subject.id if self.subject is not None else None

    @property
    def requester(self) -> str:
        return user_login(self.subject) if self.subject is not None else ""


@dataclass
class DispatchedBuild:
    """A build started by one scan, with enough detail for the CLI to record history."""

    repo: str
    pr_number: int
    trigger_id: int
    token: str
    build_id: str
    dispatched_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def find_trigger(issue, comments, phrase: str, bot_login: str, allowed) -> TriggerDecision:
    """Pick the build request that still needs an answer.

    The issue body comes first, then comments oldest to newest. An authorized
    subject containing ``phrase`` becomes the candidate and replaces any
    earlier one. A bot-authored subject clears the candidate: the bot has
    already answered everything before it.
    """
    candidate = None
    for subject in [issue, *comments]:
        if user_login(subject) == bot_login:
            if candidate is not None:
                logger.debug("Request %s already answered by bot comment %s", candidate.id, subject.id)
            candidate = None
            continue
        if phrase in (subject.body or "") and is_authorized(subject, allowed):
            candidate = subject
    return TriggerDecision(subject=candidate)


def new_token() -> str:
    return secrets.token_hex(16)


def build_request(config: dict, repo_name: str, pr_number: int, token: str, trigger_id: int) -> BuildRequest:
    return BuildRequest(
        project_name=config["project_name"],
        environment=(
            (ENV_REPO, repo_name),
            (ENV_PR, str(pr_number)),
            (ENV_TOKEN, token),
            (ENV_TRIGGER, str(trigger_id)),
        ),
    )


def ack_body(token: str, requester: str, trigger_id: int) -> str:
    """Acknowledgment comment. The result correlator later overwrites it with the report."""
    return f"Build requested by @{requester} (trigger {trigger_id}), starting a build.\n\n{token_marker(token)}"


def _process_pull_request(repo, repo_name: str, number: int, config: dict, codebuild, dry_run: bool):
    issue = get_issue(repo, number)
    label = f"{repo_name}/pull/{issue.number}"

    if issue.state == STATE_CLOSED:
        logger.info("%s closed, mark notification read", label)
        return None

    decision = find_trigger(
        issue,
        get_comments(issue),
        phrase=config["trigger_phrase"],
        bot_login=config["bot_login"],
        allowed=config["authorized_users"],
    )
    if not decision.found:
        logger.info("%s No build needed", label)
        return None

    if dry_run:
        handled = has_marker(decision.subject, config["bot_login"], config["marker_reaction"])
        logger.info("%s request %s by %s (already marked: %s)", label, decision.trigger_id, decision.requester, handled)
        return None

    if not claim(decision.subject, config["bot_login"], config["marker_reaction"]):
        logger.info("%s request %s already handled", label, decision.trigger_id)
        return None

    logger.info("%s needs build for %s", label, decision.trigger_id)
    token = new_token()
    request = build_request(config, repo_name, issue.number, token, decision.trigger_id)
    if config.get("ack_comment", True):
        # The result comment must exist before the build can finish.
        issue.create_comment(ack_body(token, decision.requester, decision.trigger_id))
    build_id = start_build(codebuild, request)

    logger.info("Triggered build commentID=%s cbID=%s token=%s", decision.trigger_id, build_id, token)
    return DispatchedBuild(
        repo=repo_name,
        pr_number=issue.number,
        trigger_id=decision.trigger_id,
        token=token,
        build_id=build_id,
    )


def scan_repository(client, repo_name: str, config: dict, codebuild, dry_run: bool = False) -> list[DispatchedBuild]:
    """Handle every unread pull-request notification of one repository.

    Pull-request threads are marked read once handled, whether or not a build
    was started. Any API error propagates and aborts the scan.
    """
    parse_repo(repo_name)
    repo = get_repo(client, repo_name)
    dispatched: list[DispatchedBuild] = []

    for notification in list_unread_notifications(repo):
        full_name = notification.repository.full_name
        if full_name != repo_name:
            logger.warning("%s doesn't match %s, skipping", full_name, repo_name)
            continue

        subject = notification.subject
        logger.info("%s notification: %s", full_name, subject.type)
        if subject.type != PULL_REQUEST:
            continue

        number = issue_number_from_url(subject.url)
        result = _process_pull_request(repo, repo_name, number, config, codebuild, dry_run)
        if result is not None:
            dispatched.append(result)

        if not dry_run:
            logger.debug("%s/pull/%d mark thread read", repo_name, number)
            mark_read(notification)

    return dispatched


def run_scan(client, config: dict, codebuild, dry_run: bool = False) -> list[DispatchedBuild]:
    dispatched: list[DispatchedBuild] = []
    for repo_name in config["repos"]:
        dispatched.extend(scan_repository(client, repo_name, config, codebuild, dry_run=dry_run))
    return dispatched
