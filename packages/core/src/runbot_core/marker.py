"""Reaction-as-marker idempotency.

A marker is a reaction of a fixed kind authored by the bot account on the
exact issue or comment that requested a build. Its presence means the request
has been handled. There is no other ledger: listing reactions and then
creating one is not atomic, so two overlapping scans can both see the marker
missing and both start a build. That outcome is a duplicate build, never
crossed results, since every build carries its own correlation token.
"""

from __future__ import annotations

import logging

from runbot_core.gh.threads import user_login

logger = logging.getLogger(__name__)


def has_marker(subject, bot_login: str, content: str) -> bool:
    for reaction in subject.get_reactions():
        if user_login(reaction) == bot_login and reaction.content == content:
            return True
    return False


def place_marker(subject, content: str) -> None:
    subject.create_reaction(content)


def claim(subject, bot_login: str, content: str) -> bool:
    """Mark ``subject`` as handled.

    Returns False when the marker was already there. A failed write raises,
    so callers never start a build for a request they could not mark.
    """
    if has_marker(subject, bot_login, content):
        logger.info("Subject %s already carries the %r marker", subject.id, content)
        return False
    place_marker(subject, content)
    return True
