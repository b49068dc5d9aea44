"""Select the pull requests that concern the viewer."""

from __future__ import annotations

from typing import Iterable

from reviewping_core.models import PullRequestRecord


def is_relevant(viewer: str, pr: PullRequestRecord) -> bool:
    """Return True if the viewer is asked to look at someone else's pull request.

    The viewer must not be the author, and must be an assignee, a requested
    reviewer, or have reviewed it before.
    """
    if pr.author == viewer:
        return False
    if viewer in pr.assignees or viewer in pr.review_requests:
        return True
    return any(review.author == viewer for review in pr.reviews)


def relevant_pull_requests(viewer: str, pull_requests: Iterable[PullRequestRecord]) -> list[PullRequestRecord]:
    # Keyed by url so the same pull request never appears twice.
    relevant: dict[str, PullRequestRecord] = {}
    for pr in pull_requests:
        if pr.url not in relevant and is_relevant(viewer, pr):
            relevant[pr.url] = pr
    return list(relevant.values())
