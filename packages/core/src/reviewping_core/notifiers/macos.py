"""macOS Notification Center via pync (terminal-notifier)."""

from __future__ import annotations

from reviewping_core.notifiers.base import BaseNotifier, Notification


class MacOSNotifier(BaseNotifier):
    """Posts notifications through terminal-notifier.

    The pull request url is used as the notification group, which makes
    terminal-notifier replace an existing notification instead of adding a
    second one, and as the click target.
    """

    def __init__(self):
        try:
            import pync
        except ImportError:
            raise ImportError("pync is required for the macOS notifier. Install reviewping[macos].")
        self._pync = pync

    def show(self, notification_id: str, notification: Notification) -> None:
        self._pync.notify(
            notification.body,
            title=notification.title,
            group=notification_id,
            open=notification_id,
        )

    def clear(self, notification_id: str) -> None:
        self._pync.remove_notifications(group=notification_id)
