"""Cross-cycle notification dedup.

The seen-set persisted at the end of a cycle is always the full list of urls
that were unreviewed in that cycle, not just the ones notified. A pull request
that drops out (reviewed, unassigned) and later comes back therefore notifies
again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from reviewping_core.models import PullRequestRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DedupResult:
    to_notify: list[PullRequestRecord] = field(default_factory=list)
    next_seen: list[str] = field(default_factory=list)


def dedup_notifications(unreviewed: Iterable[PullRequestRecord], prior_seen: Iterable[str]) -> DedupResult:
    """Split this cycle's unreviewed pull requests into new vs already-notified."""
    seen = set(prior_seen)
    by_url: dict[str, PullRequestRecord] = {}
    for pr in unreviewed:
        by_url.setdefault(pr.url, pr)

    to_notify = []
    for url, pr in by_url.items():
        if url in seen:
            logger.debug("Filtering %s", url)
        else:
            logger.debug("Showing %s", url)
            to_notify.append(pr)

    return DedupResult(to_notify=to_notify, next_seen=list(by_url))
