"""watch command - poll GitHub on a fixed interval."""

from __future__ import annotations

import signal

import click
from rich.console import Console

from reviewping_cli.factory import build_orchestrator
from reviewping_core.badge import ConsoleBadge
from reviewping_core.orchestrator import CycleResult
from reviewping_core.scheduler import PollingScheduler

console = Console()


@click.command("watch")
@click.option(
    "--interval",
    type=float,
    default=None,
    help="Minutes between checks. Overrides poll_interval_minutes from the config file.",
)
@click.pass_context
def watch_cmd(ctx, interval: float | None):
    """Keep polling GitHub and notify about new pull requests.

    Runs a check immediately, then every few minutes (3 by default, which keeps
    well inside GitHub's hourly request budget). Send SIGUSR1 to the process to
    force a refresh; press Ctrl-C to stop.
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]
    minutes = interval if interval is not None else config.get("poll_interval_minutes", 3)
    if minutes <= 0:
        raise click.UsageError("--interval must be greater than zero.")

    badge = ConsoleBadge()
    orchestrator = build_orchestrator(config, store, badge=badge)

    def _report(result: CycleResult) -> None:
        if result.ok:
            console.print(badge.render(), f"{result.badge_count} waiting, {len(result.to_notify)} new")
        else:
            console.print(badge.render(), f"[red]{result.error}[/red]")

    scheduler = PollingScheduler(orchestrator, interval_minutes=minutes, on_result=_report)

    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, lambda signum, frame: scheduler.refresh())

    console.print(f"[cyan]Watching for pull requests every {minutes:g} minute(s). Ctrl-C to stop.[/cyan]")
    try:
        scheduler.run()
    except KeyboardInterrupt:
        scheduler.stop()
        console.print("\n[dim]Stopped.[/dim]")
