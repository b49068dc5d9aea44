"""Decide whether the viewer still owes a review on a pull request.

A pull request counts as reviewed when the viewer approved it at any point, or
when the viewer's latest review or comment is strictly newer than the pull
request's ``updated_at``. Approval is never re-armed by later pushes; a plain
comment is, as soon as ``updated_at`` catches up with it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from reviewping_core.models import PullRequestRecord

APPROVED = "APPROVED"

# Earlier than any real GitHub timestamp.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def approved_by_viewer(viewer: str, pr: PullRequestRecord) -> bool:
    return any(review.author == viewer and review.state == APPROVED for review in pr.reviews)


def last_viewer_activity(viewer: str, pr: PullRequestRecord) -> datetime:
    """Return the newest review or comment timestamp by the viewer, or EPOCH."""
    latest = EPOCH
    for review in pr.reviews:
        if review.author == viewer:
            latest = max(latest, review.created_at)
    for comment in pr.comments:
        if comment.author == viewer:
            latest = max(latest, comment.created_at)
    return latest


def is_unreviewed(viewer: str, pr: PullRequestRecord) -> bool:
    is_reviewed = approved_by_viewer(viewer, pr) or last_viewer_activity(viewer, pr) > pr.updated_at
    return not is_reviewed


def unreviewed_pull_requests(viewer: str, pull_requests: Iterable[PullRequestRecord]) -> list[PullRequestRecord]:
    """Return the subset of ``pull_requests`` still waiting on the viewer, in input order."""
    return [pr for pr in pull_requests if is_unreviewed(viewer, pr)]
