from __future__ import annotations

from rich.console import Console

from reviewping_core.notifiers.base import BaseNotifier, Notification


class ConsoleNotifier(BaseNotifier):
    """Prints notifications to the terminal.

    The default on every platform. Live notifications are tracked by id so a
    repeated id replaces the earlier entry instead of stacking.
    """

    def __init__(self, console: Console | None = None):
        self._console = console or Console()
        self.live: dict[str, Notification] = {}

    def show(self, notification_id: str, notification: Notification) -> None:
        self.live[notification_id] = notification
        self._console.print(
            f"[bold green]{notification.title}[/bold green]: {notification.body}\n  [dim]{notification_id}[/dim]"
        )

    def clear(self, notification_id: str) -> None:
        self.live.pop(notification_id, None)
