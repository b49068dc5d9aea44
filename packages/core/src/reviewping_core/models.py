"""Pull request data models.

Records are built once per polling cycle from the GraphQL snapshot and never
mutated afterwards. Every nested collection is a tuple. The dict form produced
by to_dict() reuses the GraphQL field names so whatever renders the persisted
``unreviewedPullRequests`` list sees the same shape the API returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp ("2024-01-01T12:00:00Z") as aware UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _login(actor: dict | None) -> str | None:
    # Deleted accounts come back as a null author; teams have no login.
    if not actor:
        return None
    return actor.get("login")


def _nodes(connection: dict | None) -> list[dict]:
    if not connection:
        return []
    return [n for n in connection.get("nodes") or [] if n]


@dataclass(frozen=True)
class Review:
    author: str | None
    created_at: datetime
    state: str


@dataclass(frozen=True)
class Comment:
    author: str | None
    created_at: datetime


@dataclass(frozen=True)
class PullRequestRecord:
    """A single open pull request as seen by the viewer in one cycle.

    ``url`` is the identity: it keys dedup, the persisted seen-set and the
    notification id.
    """

    url: str
    title: str
    updated_at: datetime
    author: str | None
    assignees: tuple[str, ...] = ()
    review_requests: tuple[str, ...] = ()
    reviews: tuple[Review, ...] = ()
    comments: tuple[Comment, ...] = ()
    repository: str = ""

    @classmethod
    def from_graphql(cls, node: dict, repository: str = "") -> PullRequestRecord:
        """Build a record from a GraphQL ``PullRequest`` node.

        Truncated or partially missing connections are read as empty rather
        than rejected.
        """
        assignees = tuple(login for login in (_login(a) for a in _nodes(node.get("assignees"))) if login)
        review_requests = tuple(
            login
            for login in (_login(r.get("requestedReviewer")) for r in _nodes(node.get("reviewRequests")))
            if login
        )
        reviews = tuple(
            Review(
                author=_login(r.get("author")),
                created_at=parse_timestamp(r["createdAt"]),
                state=r.get("state") or "",
            )
            for r in _nodes(node.get("reviews"))
        )
        comments = tuple(
            Comment(author=_login(c.get("author")), created_at=parse_timestamp(c["createdAt"]))
            for c in _nodes(node.get("comments"))
        )
        return cls(
            url=node["url"],
            title=node.get("title") or "",
            updated_at=parse_timestamp(node["updatedAt"]),
            author=_login(node.get("author")),
            assignees=assignees,
            review_requests=review_requests,
            reviews=reviews,
            comments=comments,
            repository=repository,
        )

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "updatedAt": _format_timestamp(self.updated_at),
            "author": self.author,
            "repository": self.repository,
            "assignees": list(self.assignees),
            "reviewRequests": list(self.review_requests),
            "reviews": [
                {"author": r.author, "createdAt": _format_timestamp(r.created_at), "state": r.state}
                for r in self.reviews
            ],
            "comments": [{"author": c.author, "createdAt": _format_timestamp(c.created_at)} for c in self.comments],
        }

    @classmethod
    def from_dict(cls, d: dict) -> PullRequestRecord:
        return cls(
            url=d["url"],
            title=d.get("title", ""),
            updated_at=parse_timestamp(d["updatedAt"]),
            author=d.get("author"),
            assignees=tuple(d.get("assignees", [])),
            review_requests=tuple(d.get("reviewRequests", [])),
            reviews=tuple(
                Review(author=r.get("author"), created_at=parse_timestamp(r["createdAt"]), state=r.get("state", ""))
                for r in d.get("reviews", [])
            ),
            comments=tuple(
                Comment(author=c.get("author"), created_at=parse_timestamp(c["createdAt"]))
                for c in d.get("comments", [])
            ),
            repository=d.get("repository", ""),
        )


@dataclass(frozen=True)
class ViewerSnapshot:
    """Everything one fetch returns: who the viewer is and what they can see."""

    login: str
    pull_requests: tuple[PullRequestRecord, ...] = field(default_factory=tuple)
