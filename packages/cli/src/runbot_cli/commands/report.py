"""report command: correlate a saved build-completion event with its PR."""

from __future__ import annotations

import json

import click
from rich.console import Console

from runbot_core.correlator import BuildReport, handle_build_event
from runbot_core.errors import RunbotError
from runbot_core.gh.threads import get_client
from runbot_store.models import REPORTED, BuildRecord

console = Console()


def _report_to_record(report: BuildReport) -> BuildRecord:
    return BuildRecord(
        repo=report.repo,
        pr_number=report.pr_number,
        token=report.token,
        event=REPORTED,
        build_id=report.build_id,
        recorded_at=report.reported_at,
        comment_id=report.comment_id,
        status=f"{report.test_status}/{report.reindent_status}",
    )


@click.command("report")
@click.argument("event_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def report_cmd(ctx, event_path: str):
    """Write the result of a finished build back to its pull request.

    EVENT_PATH is a JSON file holding either the whole CodeBuild state-change
    event or just its "detail" object.
    """
    config = ctx.obj["config"]
    token = config.get("github_token")
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN, run `gh auth login`, or pass --ssm-token.")

    with open(event_path, encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{event_path} is not valid JSON: {e}")
    detail = payload.get("detail", payload) if isinstance(payload, dict) else payload

    try:
        report = handle_build_event(detail, get_client(token), config)
    except RunbotError as e:
        raise click.ClickException(str(e))

    if report.updated:
        console.print(f"[green]Updated comment {report.comment_id} on {report.repo}#{report.pr_number}[/green]")
    else:
        console.print(f"[yellow]Comment {report.comment_id} already shows this result.[/yellow]")

    store = ctx.obj.get("store")
    if store is not None:
        store.save(_report_to_record(report))
