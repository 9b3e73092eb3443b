"""scan command: run the trigger scanner once."""

from __future__ import annotations

import click
from rich.console import Console

from runbot_core.aws.session import make_client
from runbot_core.errors import RunbotError
from runbot_core.gh.threads import get_client
from runbot_core.scanner import DispatchedBuild, run_scan
from runbot_store.models import DISPATCHED, BuildRecord

console = Console()


def _dispatch_to_record(build: DispatchedBuild) -> BuildRecord:
    return BuildRecord(
        repo=build.repo,
        pr_number=build.pr_number,
        token=build.token,
        event=DISPATCHED,
        build_id=build.build_id,
        recorded_at=build.dispatched_at,
        comment_id=build.trigger_id,
    )


@click.command("scan")
@click.option("--repo", "repos", multiple=True, help="Scan only this owner/name repository. Repeatable.")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Report trigger decisions without reacting, starting builds or marking notifications read.",
)
@click.pass_context
def scan_cmd(ctx, repos: tuple[str, ...], dry_run: bool):
    """Look for new "run" requests on unread pull-request notifications.

    \b
    Required environment variables:
      GITHUB_TOKEN   token of the bot account (or use gh CLI / --ssm-token)
      AWS_*          credentials allowed to start CodeBuild builds
    """
    config = dict(ctx.obj["config"])
    if repos:
        config["repos"] = list(repos)

    token = config.get("github_token")
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN, run `gh auth login`, or pass --ssm-token.")

    codebuild = None if dry_run else make_client("codebuild", config["region"])
    try:
        dispatched = run_scan(get_client(token), config, codebuild, dry_run=dry_run)
    except RunbotError as e:
        raise click.ClickException(str(e))

    if not dispatched:
        console.print("[yellow]No builds started.[/yellow]")
        return

    store = ctx.obj.get("store")
    for build in dispatched:
        console.print(
            f"[green]Started build for {build.repo}#{build.pr_number}[/green] "
            f"(trigger {build.trigger_id}, token {build.token})"
        )
        if store is not None:
            store.save(_dispatch_to_record(build))
