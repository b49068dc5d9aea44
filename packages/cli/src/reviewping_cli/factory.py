"""Wire config into the orchestrator's collaborators.

Lives in the CLI so reviewping_core never has to know the config format.
"""

from __future__ import annotations

import logging

import click

from reviewping_core.badge import ConsoleBadge
from reviewping_core.config import github_host
from reviewping_core.gh.source import GitHubSource
from reviewping_core.notifiers.base import BaseNotifier
from reviewping_core.orchestrator import CycleOrchestrator

logger = logging.getLogger(__name__)


def require_token(config: dict) -> str:
    token = config.get("github_token")
    if not token:
        host = github_host(config.get("github_api_url", "https://api.github.com"))
        raise click.UsageError(
            f"No GitHub token found for {host}. Set GITHUB_TOKEN or run `gh auth login --hostname {host}`.\n"
            "The token needs the `repo` scope to see private pull requests, and `read:org` for "
            "repositories you reach through an organisation."
        )
    logger.info(
        "Polling %s with a token from %s.",
        config.get("github_api_url"),
        config.get("github_token_source") or "config",
    )
    return token


def build_notifier(config: dict) -> BaseNotifier:
    kind = config.get("notifier", "console")
    if kind == "macos":
        from reviewping_core.notifiers.macos import MacOSNotifier

        return MacOSNotifier()
    if kind == "console":
        from reviewping_core.notifiers.console import ConsoleNotifier

        return ConsoleNotifier()
    raise click.UsageError(f"Unknown notifier: {kind!r}. Choose 'console' or 'macos'.")


def build_orchestrator(config: dict, store, badge: ConsoleBadge | None = None) -> CycleOrchestrator:
    source = GitHubSource(
        token=require_token(config),
        api_url=config.get("github_api_url", "https://api.github.com"),
        timeout=config.get("request_timeout", 30),
        page_sizes=config.get("page_sizes"),
    )
    return CycleOrchestrator(
        source=source,
        store=store,
        notifier=build_notifier(config),
        badge=badge or ConsoleBadge(),
    )
