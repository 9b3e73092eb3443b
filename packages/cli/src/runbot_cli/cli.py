"""CLI entry point for runbot.

Commands:
  scan     run the trigger scanner once against the configured repositories
  report   post the result of a finished build from a saved event file
  history  display dispatched and reported builds from the configured store
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from runbot_cli.commands.history import history_cmd
from runbot_cli.commands.report import report_cmd
from runbot_cli.commands.scan import scan_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .runbot.yml settings.

      store: sqlite → SQLiteStore (uses store_path, default .runbot.db)
      (default)     → NoOpStore  (no persistence)
    """
    from runbot_store.noop import NoOpStore

    if config.get("store", "noop") == "sqlite":
        from runbot_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.get("store_path", ".runbot.db"))

    return NoOpStore()


@click.group()
@click.version_option(
    version=importlib.metadata.version("runbot"),
    prog_name="runbot",
)
@click.option(
    "--config",
    "config_path",
    default=".runbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="RUNBOT_CONFIG",
)
@click.option("--ssm-token", is_flag=True, help="Fall back to the SSM parameter for the GitHub token.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, ssm_token: bool, verbose: bool):
    """Start builds from "run" comments on pull requests and report their results."""
    from runbot_core.config import load_config
    from runbot_cli.auth import resolve_github_token

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    ctx.ensure_object(dict)

    config = load_config(config_path)

    if ctx.invoked_subcommand != "history":
        token = resolve_github_token(
            ssm_parameter=config["token_parameter"] if ssm_token else None,
            region=config["region"],
        )
        if token:
            config["github_token"] = token

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(scan_cmd)
main.add_command(report_cmd)
main.add_command(history_cmd)
