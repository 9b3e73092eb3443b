"""Build artifacts and the report comment rendered from them."""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass

from runbot_core.aws.artifacts import ArtifactStore

logger = logging.getLogger(__name__)

TESTS_EXITCODE = "emacs-tests.exitcode"
TESTS_RUNTIME = "emacs-tests.runtime"
TESTS_LOG = "emacs-tests.log"
REINDENT_EXITCODE = "batch-reindent.exitcode"
REINDENT_RUNTIME = "batch-reindent.runtime"
REINDENT_DIFFSTAT = "batch-reindent.diffstat"
REINDENT_DIFF = "batch-reindent.diff"
REINDENT_LOG = "batch-reindent.log"
SOURCE_REVISION = "git_sha"

# Served as text so the links open in the browser instead of downloading.
TEXT_ARTIFACTS = (REINDENT_DIFF, REINDENT_LOG, TESTS_LOG)

_TOKEN_MARKER = "<!-- runbot-token: {} -->"
_TOKEN_MARKER_RE = re.compile(r"<!-- runbot-token: ([0-9a-f]+) -->")


@dataclass(frozen=True)
class ArtifactBundle:
    source_revision: str
    test_exit_code: int
    test_runtime_ms: int
    reindent_exit_code: int
    reindent_runtime_ms: int
    diff_stat: str
    test_log_url: str
    diff_url: str
    reindent_log_url: str


def token_marker(token: str) -> str:
    """Hidden comment text that ties a PR comment to one build."""
    return _TOKEN_MARKER.format(token)


def find_token(body: str | None) -> str | None:
    match = _TOKEN_MARKER_RE.search(body or "")
    return match.group(1) if match else None


def suite_status(exit_code: int) -> str:
    return "Pass" if exit_code == 0 else "FAIL"


def reindent_status(exit_code: int) -> str:
    return "Ok" if exit_code == 0 else "ERROR"


def format_duration(ms: int) -> str:
    """Format milliseconds as a compact duration: 0s, 850ms, 12.5s, 1m3s, 1h2m0.5s."""
    if ms == 0:
        return "0s"
    if ms < 1000:
        return f"{ms}ms"
    hours, rem = divmod(ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds = f"{rem / 1000:.3f}".rstrip("0").rstrip(".") + "s"
    if hours:
        return f"{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{minutes}m{seconds}"
    return seconds


def fetch_bundle(store: ArtifactStore) -> ArtifactBundle:
    """Read every artifact the report needs and make the text ones browsable."""
    bundle = ArtifactBundle(
        source_revision=store.read_text(SOURCE_REVISION),
        test_exit_code=store.read_int(TESTS_EXITCODE),
        test_runtime_ms=store.read_int(TESTS_RUNTIME),
        reindent_exit_code=store.read_int(REINDENT_EXITCODE),
        reindent_runtime_ms=store.read_int(REINDENT_RUNTIME),
        diff_stat=store.read_text(REINDENT_DIFFSTAT),
        test_log_url=store.url(TESTS_LOG),
        diff_url=store.url(REINDENT_DIFF),
        reindent_log_url=store.url(REINDENT_LOG),
    )
    for name in TEXT_ARTIFACTS:
        store.set_content_type(name, "text/plain")
    return bundle


def _link(url: str) -> str:
    return f"[{posixpath.basename(url)}]({url})"


def render_report(bundle: ArtifactBundle, build_uuid: str, token: str) -> str:
    """Render the result comment body.

    The output depends only on its arguments, so re-rendering for a redelivered
    event produces the same text. The token marker is kept so the comment can
    be found again.
    """
    lines = [
        f"Build result for {bundle.source_revision} (build_id={build_uuid})",
        f"ERT tests {suite_status(bundle.test_exit_code)} in {format_duration(bundle.test_runtime_ms)}",
        f"Test output: {_link(bundle.test_log_url)}",
        "",
        f"Reindent: {reindent_status(bundle.reindent_exit_code)} in {format_duration(bundle.reindent_runtime_ms)}",
        "",
        "```",
        bundle.diff_stat,
        "```",
        f"Diff output: {_link(bundle.diff_url)}",
        f"Reindent emacs output: {_link(bundle.reindent_log_url)}",
        "",
        token_marker(token),
    ]
    return "\n".join(lines)
