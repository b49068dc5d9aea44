"""status command - summarise persisted poller state."""

from __future__ import annotations

import click
from rich.console import Console

from reviewping_core.badge import ConsoleBadge
from reviewping_core.orchestrator import ERROR_KEY, LAST_CHECKED_KEY, LAST_SEEN_KEY, UNREVIEWED_KEY

console = Console()


@click.command("status")
@click.pass_context
def status_cmd(ctx):
    """Show the badge, last error and last successful check."""
    store = ctx.obj["store"]
    state = store.get([UNREVIEWED_KEY, LAST_SEEN_KEY, ERROR_KEY, LAST_CHECKED_KEY])

    if not state:
        console.print("[yellow]No checks recorded yet. Run `reviewping check`.[/yellow]")
        return

    unreviewed = state.get(UNREVIEWED_KEY) or []
    badge = ConsoleBadge()
    if state.get(ERROR_KEY):
        badge.show_error()
    else:
        badge.show_count(len(unreviewed))

    console.print(badge.render())
    console.print(f"  Waiting for review: {len(unreviewed)}")
    console.print(f"  Already notified:   {len(state.get(LAST_SEEN_KEY) or [])}")
    last_checked = state.get(LAST_CHECKED_KEY)
    console.print(f"  Last good check:    {last_checked[:19].replace('T', ' ') if last_checked else 'never'}")
    if state.get(ERROR_KEY):
        console.print(f"  [red]Last error: {state[ERROR_KEY]}[/red]")
