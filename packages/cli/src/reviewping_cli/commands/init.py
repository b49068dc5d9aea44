"""init command - interactive setup wizard.

Writes .reviewping.yml with the store, notifier and polling interval. When the
Gist store is chosen, creates the private Gist through the GitHub API so the
user never has to copy an ID around by hand.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import yaml
from rich.console import Console

logger = logging.getLogger(__name__)
console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up reviewping.

    Creates .reviewping.yml and, for the Gist store, a private Gist that holds
    the poller state.
    """
    config_path = Path((ctx.obj or {}).get("config_path", ".reviewping.yml"))
    console.print("\n[bold cyan]reviewping init[/bold cyan] - setup wizard\n")

    # --- Choose notifier ---
    default_notifier = "macos" if sys.platform == "darwin" else "console"
    notifier = click.prompt(
        "Notifier",
        type=click.Choice(["console", "macos"]),
        default=default_notifier,
    )

    # --- Choose store backend ---
    console.print("\nState store:")
    console.print("  [bold]sqlite[/bold]  - local SQLite file (default)")
    console.print("  [bold]gist[/bold]    - private GitHub Gist, shared between machines")
    console.print("  [bold]memory[/bold]  - nothing persisted; every run notifies again")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["sqlite", "gist", "memory"]),
        default="sqlite",
    )

    config: dict = {"notifier": notifier}

    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default="~/.reviewping.db")
        config["store"] = "sqlite"
        if db_path != "~/.reviewping.db":
            config["store_path"] = db_path
        console.print(f"[green]SQLite store configured at {db_path}[/green]")

    elif store_type == "gist":
        token = (ctx.obj or {}).get("config", {}).get("github_token")
        gist_id = _create_state_gist(token) if token else None
        if gist_id:
            console.print(f"[green]Created state Gist: {gist_id}[/green]")
            config["store"] = "gist"
            config["gist_id"] = gist_id
        else:
            console.print(f"[yellow]Gist creation failed - add gist_id manually to {config_path}[/yellow]")

    else:
        config["store"] = "memory"

    # --- Polling interval ---
    interval = click.prompt("Minutes between checks", type=click.IntRange(min=1), default=3)
    if interval != 3:
        config["poll_interval_minutes"] = interval

    _write_config(config_path, config)
    console.print(f"[green]Created {config_path}[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Start polling with: [bold]reviewping watch[/bold]")


def _create_state_gist(token: str) -> str | None:
    """Create a private Gist holding an empty state document and return its ID."""
    from github import Github, GithubException, InputFileContent

    from reviewping_store.gist import GIST_FILENAME

    try:
        gist = (
            Github(token)
            .get_user()
            .create_gist(
                public=False,
                files={GIST_FILENAME: InputFileContent(json.dumps({}))},
                description="reviewping poller state",
            )
        )
    except GithubException as e:
        logger.warning("Gist creation failed: %s", e)
        return None
    return gist.id


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
