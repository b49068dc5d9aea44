"""Desktop notification interface.

The notification id is always the pull request url. Showing an id that is
already live replaces the previous notification, so there is never more than
one per pull request, and a click can be mapped straight back to the url.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import click

from reviewping_core.models import PullRequestRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    body: str
    require_interaction: bool = True

    @classmethod
    def for_pull_request(cls, pr: PullRequestRecord) -> Notification:
        return cls(title="New pull request", body=pr.title)


class BaseNotifier(ABC):
    @abstractmethod
    def show(self, notification_id: str, notification: Notification) -> None:
        """Display (or replace) the notification with this id."""

    @abstractmethod
    def clear(self, notification_id: str) -> None:
        """Dismiss the notification with this id. Unknown ids are ignored."""

    def on_clicked(self, notification_id: str) -> None:
        """Open the pull request behind a notification and dismiss it."""
        logger.debug("Notification clicked: %s", notification_id)
        click.launch(notification_id)
        self.clear(notification_id)
