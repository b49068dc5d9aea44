"""Fetch everything the viewer can see in a single GraphQL request.

One request per cycle keeps the poller inside GitHub's hourly budget. Page sizes
are bounded; anything past a page boundary is simply not seen this cycle.
"""

from __future__ import annotations

import logging

import requests

from reviewping_core.config import DEFAULT_PAGE_SIZES
from reviewping_core.errors import FetchError
from reviewping_core.models import PullRequestRecord, ViewerSnapshot

logger = logging.getLogger(__name__)

VIEWER_QUERY = """
{{
  viewer {{
    login
    repositories(first: {repositories}, affiliations: [OWNER, COLLABORATOR, ORGANIZATION_MEMBER]) {{
      nodes {{
        nameWithOwner
        pullRequests(first: {pull_requests}, states: [OPEN]) {{
          nodes {{
            url
            title
            updatedAt
            author {{ login }}
            reviews(first: {reviews}) {{
              nodes {{ author {{ login }} createdAt state }}
            }}
            comments(first: {comments}) {{
              nodes {{ author {{ login }} createdAt }}
            }}
            assignees(first: {assignees}) {{
              nodes {{ login }}
            }}
            reviewRequests(first: {review_requests}) {{
              nodes {{ requestedReviewer {{ ... on User {{ login }} }} }}
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""


def build_query(page_sizes: dict | None = None) -> str:
    sizes = {**DEFAULT_PAGE_SIZES, **(page_sizes or {})}
    return VIEWER_QUERY.format(**sizes)


def parse_viewer_payload(payload: dict) -> ViewerSnapshot:
    """Turn a GraphQL ``data`` object into a ViewerSnapshot."""
    viewer = payload.get("viewer") or {}
    login = viewer.get("login")
    if not login:
        raise FetchError("GitHub response did not include the viewer login.")

    pull_requests: list[PullRequestRecord] = []
    for repository in (viewer.get("repositories") or {}).get("nodes") or []:
        if not repository:
            continue
        name = repository.get("nameWithOwner", "")
        for node in (repository.get("pullRequests") or {}).get("nodes") or []:
            if node:
                pull_requests.append(PullRequestRecord.from_graphql(node, repository=name))

    return ViewerSnapshot(login=login, pull_requests=tuple(pull_requests))


class GitHubSource:
    """Data source backed by the GitHub GraphQL API."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: int = 30,
        page_sizes: dict | None = None,
    ):
        self._token = token
        self._url = f"{api_url.rstrip('/')}/graphql"
        self._timeout = timeout
        self._query = build_query(page_sizes)

    def fetch(self) -> ViewerSnapshot:
        try:
            response = requests.post(
                self._url,
                headers={"Authorization": f"bearer {self._token}"},
                json={"query": self._query},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise FetchError(f"Could not reach GitHub: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise FetchError(f"GitHub returned a non-JSON response (HTTP {response.status_code}).") from e

        # GraphQL reports query errors alongside a 200.
        errors = result.get("errors") if isinstance(result, dict) else None
        if errors:
            logger.error("GitHub GraphQL errors: %s", errors)
            raise FetchError(errors[0].get("message", "Unknown GraphQL error"))
        if response.status_code != 200:
            message = result.get("message") if isinstance(result, dict) else None
            logger.error("GitHub responded with HTTP %d: %s", response.status_code, result)
            raise FetchError(message or f"GitHub responded with HTTP {response.status_code}.")

        snapshot = parse_viewer_payload(result.get("data") or {})
        logger.debug("Fetched %d open pull request(s) for %s", len(snapshot.pull_requests), snapshot.login)
        return snapshot
