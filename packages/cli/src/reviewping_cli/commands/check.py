"""check command - run one polling cycle now."""

from __future__ import annotations

import click
from rich.console import Console

from reviewping_cli.factory import build_orchestrator
from reviewping_cli.render import pull_request_table
from reviewping_core.badge import ConsoleBadge
from reviewping_core.orchestrator import ERROR_KEY, LAST_CHECKED_KEY, LAST_SEEN_KEY, UNREVIEWED_KEY, Trigger

console = Console()


@click.command("check")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Run against a copy of the stored state; nothing is written back.",
)
@click.pass_context
def check_cmd(ctx, dry_run: bool):
    """Check GitHub once and notify about new pull requests.

    Equivalent to a manual refresh: it runs the same cycle `watch` runs on its
    timer. Exits with status 1 if the cycle failed.
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]

    if dry_run:
        from reviewping_store.memory import MemoryStore

        store = MemoryStore(store.get([UNREVIEWED_KEY, LAST_SEEN_KEY, ERROR_KEY, LAST_CHECKED_KEY]))

    badge = ConsoleBadge()
    orchestrator = build_orchestrator(config, store, badge=badge)
    result = orchestrator.run_cycle(Trigger.MANUAL_REFRESH)

    console.print(badge.render(), end=" ")
    if result is None or not result.ok:
        message = result.error if result is not None else "another check is already running"
        console.print(f"[red]Check failed: {message}[/red]")
        ctx.exit(1)

    if not result.unreviewed:
        console.print("[green]Nothing waiting for your review.[/green]")
        return

    console.print(
        f"[bold]{result.badge_count}[/bold] pull request(s) waiting for your review, "
        f"{len(result.to_notify)} new."
    )
    console.print(pull_request_table(result.unreviewed))
