"""Decoding of CodeBuild "Build State Change" events.

The event never names the pull request directly. Everything needed to find the
way back is either encoded in the two ARNs (where the build ran, where its
artifacts live) or in the environment variables the scanner set when it
started the build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from runbot_core.config import parse_repo
from runbot_core.errors import IdentifierFormatError, MalformedInputError

logger = logging.getLogger(__name__)

STATUS_SUCCEEDED = "SUCCEEDED"

ENV_REPO = "REPO"
ENV_PR = "PR"
ENV_TOKEN = "RUNBOT_TOKEN"
ENV_TRIGGER = "TRIGGER_COMMENT"


@dataclass(frozen=True)
class BuildLocation:
    region: str
    account: str
    project: str
    build_uuid: str


@dataclass(frozen=True)
class ArtifactLocation:
    bucket: str
    prefix: str


@dataclass(frozen=True)
class CorrelationMetadata:
    owner: str
    name: str
    pr_number: int
    token: str
    trigger_id: Optional[int] = None

    @property
    def repo(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class BuildCompletionEvent:
    build_id: str
    status: str
    artifact_location: str
    project_name: str = ""
    environment: dict[str, str] = field(default_factory=dict)


def parse_build_id(build_id: str) -> BuildLocation:
    """Decode ``arn:aws:codebuild:<region>:<account>:build/<project>:<uuid>``.

    The part before the first ``/`` must be a six-segment ARN prefix and the
    part after it exactly ``<project>:<uuid>``.
    """
    halves = build_id.split("/")
    if len(halves) != 2:
        raise IdentifierFormatError(f"Unexpected build id format {build_id} len == {len(halves)}")
    arn_prefix, cb_id = halves

    arn_parts = arn_prefix.split(":")
    if len(arn_parts) != 6 or arn_parts[:3] != ["arn", "aws", "codebuild"]:
        raise IdentifierFormatError(f"Unexpected arn prefix format {arn_prefix} len == {len(arn_parts)}")

    cb_parts = cb_id.split(":")
    if len(cb_parts) != 2 or not all(cb_parts):
        raise IdentifierFormatError(f"Unexpected cb id format {cb_id}")

    return BuildLocation(region=arn_parts[3], account=arn_parts[4], project=cb_parts[0], build_uuid=cb_parts[1])


def parse_artifact_location(location: str) -> ArtifactLocation:
    """Decode ``arn:aws:s3:::<bucket>/<prefix>``."""
    parts = location.split(":")
    if len(parts) != 6 or parts[:3] != ["arn", "aws", "s3"]:
        raise IdentifierFormatError(f"Unexpected location format {location} len == {len(parts)}")

    bucket_path = parts[5].split("/", 1)
    if len(bucket_path) != 2 or not bucket_path[0] or not bucket_path[1]:
        raise IdentifierFormatError(f"Unexpected bucket location format {location}")
    return ArtifactLocation(bucket=bucket_path[0], prefix=bucket_path[1])


def parse_event(detail: dict) -> BuildCompletionEvent:
    """Build a BuildCompletionEvent from the event's ``detail`` object."""
    try:
        build_id = detail["build-id"]
        status = detail["build-status"]
        info = detail["additional-information"]
        location = info["artifact"]["location"]
    except (KeyError, TypeError) as e:
        raise MalformedInputError(f"Build event is missing {e}")

    for key, value in (("build-id", build_id), ("build-status", status), ("artifact location", location)):
        if not isinstance(value, str):
            raise MalformedInputError(f"Build event {key} is not a string: {value!r}")

    environment = info.get("environment") or {}
    if not isinstance(environment, dict):
        raise MalformedInputError(f"Build event environment is not an object: {environment!r}")
    env_vars = environment.get("environment-variables") or []
    if not isinstance(env_vars, list):
        raise MalformedInputError(f"Build event environment-variables is not a list: {env_vars!r}")

    env: dict[str, str] = {}
    for ev in env_vars:
        if not isinstance(ev, dict) or not isinstance(ev.get("name"), str):
            raise MalformedInputError(f"Malformed environment variable {ev!r}")
        value = ev.get("value", "")
        env[ev["name"]] = value if isinstance(value, str) else str(value)

    return BuildCompletionEvent(
        build_id=build_id,
        status=status,
        artifact_location=location,
        project_name=detail.get("project-name", ""),
        environment=env,
    )


def correlation_metadata(event: BuildCompletionEvent) -> CorrelationMetadata:
    """Read the PR, repository and token the scanner attached to the build."""
    env = event.environment

    try:
        pr_number = int(env.get(ENV_PR, ""))
    except ValueError:
        raise MalformedInputError(f"Failed to parse {ENV_PR} {env.get(ENV_PR)!r}")
    if pr_number < 1:
        raise MalformedInputError(f"{ENV_PR} must be positive, got {pr_number}")

    if ENV_REPO not in env:
        raise MalformedInputError(f"Build environment has no {ENV_REPO}: {sorted(env)}")
    owner, name = parse_repo(env[ENV_REPO])

    token = env.get(ENV_TOKEN, "").strip()
    if not token:
        raise MalformedInputError(f"Build environment has no {ENV_TOKEN}: {sorted(env)}")

    trigger_id = None
    if env.get(ENV_TRIGGER):
        try:
            trigger_id = int(env[ENV_TRIGGER])
        except ValueError:
            raise MalformedInputError(f"Failed to parse {ENV_TRIGGER} {env[ENV_TRIGGER]!r}")

    return CorrelationMetadata(owner=owner, name=name, pr_number=pr_number, token=token, trigger_id=trigger_id)
