from __future__ import annotations

import logging

from github import Github

from runbot_core.errors import MalformedInputError

logger = logging.getLogger(__name__)

PULL_REQUEST = "PullRequest"
STATE_CLOSED = "closed"


def get_client(token: str) -> Github:
    return Github(token)


def get_repo(client, full_name: str):
    return client.get_repo(full_name)


def list_unread_notifications(repo):
    return repo.get_notifications()


def get_issue(repo, number: int):
    return repo.get_issue(number)


def get_comments(issue) -> list:
    """Return the issue's comments, oldest first."""
    return list(issue.get_comments())


def issue_number_from_url(url: str) -> int:
    """Return the issue/PR number from a notification subject URL."""
    tail = (url or "").rstrip("/").rsplit("/", 1)[-1]
    try:
        return int(tail)
    except ValueError:
        raise MalformedInputError(f"Subject URL does not end in an issue number: {url!r}")


def mark_read(notification) -> None:
    notification.mark_as_read()


def user_login(owned) -> str:
    """Return the author login of an issue, comment or reaction, or "" when unknown."""
    user = getattr(owned, "user", None)
    if user is None:
        return ""
    return user.login or ""


def is_authorized(owned, allowed) -> bool:
    login = user_login(owned)
    return bool(login) and login in allowed
