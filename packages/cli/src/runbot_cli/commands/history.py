"""history command: display dispatched and reported builds from the store."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()

_event_style = {
    "dispatched": "cyan",
    "reported": "green",
}


@click.command("history")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--pr", "pr_number", type=int, default=None, help="Filter by PR number.")
@click.option("--token", default=None, help="Show only records for this correlation token.")
@click.option("--limit", default=20, show_default=True, help="Maximum number of records to show.")
@click.pass_context
def history_cmd(ctx, repo: str, pr_number: int | None, token: str | None, limit: int):
    """Show builds the bot started and reported for a repository.

    Reads from the configured store. Add 'store: sqlite' to .runbot.yml to
    keep history.
    """
    from runbot_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError("No store configured. Add 'store: sqlite' to .runbot.yml.")

    records = store.list_records(repo, pr_number=pr_number)
    if token:
        records = [r for r in records if r.token == token]
    if not records:
        console.print("[yellow]No build records found.[/yellow]")
        return

    records = list(reversed(records))[:limit]

    table = Table(title=f"Build History: {repo}", show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold", no_wrap=True)
    table.add_column("Event")
    table.add_column("Token", no_wrap=True)
    table.add_column("Comment", justify="right")
    table.add_column("Status")
    table.add_column("Recorded At", no_wrap=True)

    for r in records:
        style = _event_style.get(r.event, "white")
        table.add_row(
            f"#{r.pr_number}",
            f"[{style}]{r.event}[/{style}]",
            r.token[:8],
            str(r.comment_id or ""),
            r.status,
            r.recorded_at[:19].replace("T", " "),
        )

    console.print(table)
