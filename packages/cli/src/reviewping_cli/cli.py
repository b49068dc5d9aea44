"""CLI entry point for reviewping.

Commands:
  check   - run one polling cycle now (manual refresh)
  watch   - poll on a fixed interval until interrupted
  list    - show the pull requests currently waiting for your review
  open    - open a pull request and dismiss its notification
  status  - show the last error and when the last successful check ran
  init    - interactive setup wizard
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from reviewping_cli.commands.check import check_cmd
from reviewping_cli.commands.init import init_cmd
from reviewping_cli.commands.list_prs import list_cmd
from reviewping_cli.commands.open_pr import open_cmd
from reviewping_cli.commands.status import status_cmd
from reviewping_cli.commands.watch import watch_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .reviewping.yml settings.

    Store selection hierarchy:
      store: sqlite → SQLiteStore (store_path, default ~/.reviewping.db)
      store: gist   → GistStore   (requires gist_id and github_token)
      store: memory → MemoryStore (nothing persists between runs)
    """
    from reviewping_store.memory import MemoryStore

    store_type = config.get("store", "sqlite")

    if store_type == "gist":
        from reviewping_store.gist import GistStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            console.print(
                "[yellow]GistStore requires gist_id and a GitHub token. Falling back to an in-memory store.[/yellow]"
            )
            return MemoryStore()
        return GistStore(gist_id=gist_id, token=token)

    if store_type == "memory":
        return MemoryStore()

    from reviewping_store.sqlite import SQLiteStore

    return SQLiteStore(db_path=config.get("store_path", "~/.reviewping.db"))


@click.group()
@click.version_option(
    version=importlib.metadata.version("reviewping"),
    prog_name="reviewping",
)
@click.option(
    "--config",
    "config_path",
    default=".reviewping.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEWPING_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Desktop notifications for GitHub pull requests waiting on your review."""
    from reviewping_core.config import load_config

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    ctx.ensure_object(dict)

    config = load_config(config_path)

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.call_on_close(store.close)


main.add_command(check_cmd)
main.add_command(watch_cmd)
main.add_command(list_cmd)
main.add_command(open_cmd)
main.add_command(status_cmd)
main.add_command(init_cmd)
