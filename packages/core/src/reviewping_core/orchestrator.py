"""One polling cycle: fetch → filter → classify → notify → persist.

The orchestrator is the only component that touches cross-cycle state (the
seen-set, the error field and the badge). Every trigger goes through
run_cycle(), and at most one cycle runs at a time: a stale cycle finishing late
would otherwise overwrite the seen-set written by a newer one and re-notify.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from reviewping_core.classifier import unreviewed_pull_requests
from reviewping_core.dedup import dedup_notifications
from reviewping_core.models import PullRequestRecord
from reviewping_core.notifiers.base import Notification
from reviewping_core.relevance import relevant_pull_requests

logger = logging.getLogger(__name__)

UNREVIEWED_KEY = "unreviewedPullRequests"
LAST_SEEN_KEY = "lastSeenPullRequests"
ERROR_KEY = "error"
LAST_CHECKED_KEY = "lastCheckedAt"

SuppressHook = Callable[[list[PullRequestRecord]], list[PullRequestRecord]]


class CycleState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    FILTERING = "filtering"
    CLASSIFYING = "classifying"
    NOTIFYING = "notifying"
    PERSISTING = "persisting"
    ERROR = "error"


class Trigger(enum.Enum):
    SCHEDULE = "schedule"
    INSTALL = "install"
    MANUAL_REFRESH = "manual-refresh"


@dataclass
class CycleResult:
    """Outcome of one cycle, successful or not."""

    trigger: Trigger
    unreviewed: list[PullRequestRecord] = field(default_factory=list)
    to_notify: list[PullRequestRecord] = field(default_factory=list)
    next_seen: list[str] = field(default_factory=list)
    badge_count: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CycleOrchestrator:
    """Runs polling cycles against injected collaborators.

    ``source`` exposes fetch() -> ViewerSnapshot; ``store`` is any
    reviewping_store BaseStore; ``notifier`` and ``badge`` are BaseNotifier and
    BaseBadge implementations. ``suppress`` is an optional post-classification
    filter (e.g. muting) applied before dedup; by default nothing is suppressed.
    """

    def __init__(self, source, store, notifier, badge, suppress: SuppressHook | None = None):
        self._source = source
        self._store = store
        self._notifier = notifier
        self._badge = badge
        self._suppress = suppress
        self._lock = threading.Lock()
        self.state = CycleState.IDLE

    def _enter(self, state: CycleState) -> None:
        logger.debug("Cycle state: %s → %s", self.state.value, state.value)
        self.state = state

    def run_cycle(self, trigger: Trigger = Trigger.SCHEDULE) -> CycleResult | None:
        """Run one cycle. Returns None if another cycle is already in flight."""
        if not self._lock.acquire(blocking=False):
            logger.info("Cycle already in progress; dropping %s trigger.", trigger.value)
            return None
        try:
            logger.info("Checking pull requests (trigger: %s)", trigger.value)
            try:
                return self._run(trigger)
            except Exception as e:
                return self._fail(trigger, e)
            finally:
                self._enter(CycleState.IDLE)
        finally:
            self._lock.release()

    def _run(self, trigger: Trigger) -> CycleResult:
        self._enter(CycleState.FETCHING)
        snapshot = self._source.fetch()
        viewer = snapshot.login

        self._enter(CycleState.FILTERING)
        relevant = relevant_pull_requests(viewer, snapshot.pull_requests)

        self._enter(CycleState.CLASSIFYING)
        unreviewed = unreviewed_pull_requests(viewer, relevant)
        logger.info("%d relevant, %d unreviewed pull request(s) for %s", len(relevant), len(unreviewed), viewer)

        candidates = self._suppress(unreviewed) if self._suppress else unreviewed

        self._enter(CycleState.NOTIFYING)
        dedup = dedup_notifications(candidates, self._prior_seen())
        for pr in dedup.to_notify:
            try:
                self._notifier.show(pr.url, Notification.for_pull_request(pr))
            except Exception as e:
                logger.warning("Could not show notification for %s: %s", pr.url, e)

        self._enter(CycleState.PERSISTING)
        self._store.set(
            {
                UNREVIEWED_KEY: [pr.to_dict() for pr in unreviewed],
                LAST_SEEN_KEY: dedup.next_seen,
                ERROR_KEY: None,
                LAST_CHECKED_KEY: datetime.now(timezone.utc).isoformat(),
            }
        )
        # State is committed from here on; a badge failure must not undo that.
        self._update_badge(self._badge.show_count, len(unreviewed))

        return CycleResult(
            trigger=trigger,
            unreviewed=unreviewed,
            to_notify=dedup.to_notify,
            next_seen=dedup.next_seen,
            badge_count=len(unreviewed),
        )

    def _fail(self, trigger: Trigger, error: Exception) -> CycleResult:
        self._enter(CycleState.ERROR)
        message = str(error) or type(error).__name__
        logger.warning("Cycle failed (%s): %s", type(error).__name__, message)
        try:
            # Only the error field; the last good unreviewed list stays visible.
            self._store.set({ERROR_KEY: message})
        except Exception as e:
            logger.error("Could not persist cycle error: %s", e)
        self._update_badge(self._badge.show_error)
        return CycleResult(trigger=trigger, error=message)

    def _prior_seen(self) -> list[str]:
        """Read the persisted seen-set. Anything that is not a list of urls reads as empty."""
        value = self._store.get([LAST_SEEN_KEY]).get(LAST_SEEN_KEY)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("Ignoring malformed %s value of type %s", LAST_SEEN_KEY, type(value).__name__)
            return []
        return [url for url in value if isinstance(url, str)]

    @staticmethod
    def _update_badge(update, *args) -> None:
        try:
            update(*args)
        except Exception as e:
            logger.error("Could not update badge: %s", e)
