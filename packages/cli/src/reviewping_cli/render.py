from __future__ import annotations

from rich.table import Table

from reviewping_core.models import PullRequestRecord


def pull_request_table(records: list[PullRequestRecord], title: str = "Waiting for your review") -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Repository", max_width=30)
    table.add_column("Title", max_width=50)
    table.add_column("Author", width=16)
    table.add_column("Updated", width=17)
    table.add_column("URL", overflow="fold")

    # Oldest first: the ones that have been waiting longest.
    for pr in sorted(records, key=lambda p: p.updated_at):
        table.add_row(
            pr.repository,
            pr.title,
            pr.author or "ghost",
            pr.updated_at.strftime("%Y-%m-%d %H:%M"),
            pr.url,
        )
    return table
