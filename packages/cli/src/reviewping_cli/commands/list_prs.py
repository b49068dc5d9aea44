"""list command - show the stored unreviewed pull requests."""

from __future__ import annotations

import click
from rich.console import Console

from reviewping_cli.render import pull_request_table
from reviewping_core.models import PullRequestRecord
from reviewping_core.orchestrator import ERROR_KEY, UNREVIEWED_KEY

console = Console()


@click.command("list")
@click.option("--repo", default=None, help="Only show pull requests from this repository (owner/name).")
@click.pass_context
def list_cmd(ctx, repo: str | None):
    """Show pull requests waiting for your review.

    Reads the list saved by the last successful check; it does not contact
    GitHub. If the last check failed, the list shown is the one from before
    the failure.
    """
    store = ctx.obj["store"]
    state = store.get([UNREVIEWED_KEY, ERROR_KEY])

    records = [PullRequestRecord.from_dict(d) for d in state.get(UNREVIEWED_KEY) or []]
    if repo:
        records = [r for r in records if r.repository == repo]

    if state.get(ERROR_KEY):
        console.print(f"[red]Last check failed: {state[ERROR_KEY]}[/red]")

    if not records:
        console.print("[green]Nothing waiting for your review.[/green]")
        return

    console.print(pull_request_table(records))
