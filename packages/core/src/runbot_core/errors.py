"""Named failure kinds for the scanner and the result correlator.

Upstream API failures are not wrapped: ``github.GithubException`` and
botocore's ``ClientError`` propagate unchanged so the invoking scheduler sees
the original error and retries the whole invocation.
"""

from __future__ import annotations


class RunbotError(Exception):
    """Base class for every error raised by runbot itself."""


class MalformedInputError(RunbotError, ValueError):
    """An identifier, event field or environment variable has an unexpected shape."""


class IdentifierFormatError(MalformedInputError):
    """A build ARN or artifact location ARN could not be decoded."""


class BuildStatusError(RunbotError):
    """The completed build did not succeed; nothing is reported."""

    def __init__(self, build_id: str, status: str):
        super().__init__(f"Build {build_id} status {status}")
        self.build_id = build_id
        self.status = status


class CorrelationError(RunbotError):
    """No bot comment on the pull request carries the build's correlation token."""
