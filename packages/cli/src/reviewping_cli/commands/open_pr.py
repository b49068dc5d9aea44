"""open command - what clicking a notification does."""

from __future__ import annotations

import click

from reviewping_cli.factory import build_notifier


@click.command("open")
@click.argument("url")
@click.pass_context
def open_cmd(ctx, url: str):
    """Open a pull request in the browser and dismiss its notification.

    URL is the pull request url, which is also the notification id.
    """
    notifier = build_notifier(ctx.obj["config"])
    notifier.on_clicked(url)
