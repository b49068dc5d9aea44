import copy
import logging
import os
import subprocess
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import yaml

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZES: dict = {
    "repositories": 100,
    "pull_requests": 50,
    "reviews": 20,
    "comments": 20,
    "assignees": 10,
    "review_requests": 10,
}

DEFAULT_CONFIG: dict = {
    # GitHub allows roughly 50 requests/hour for this query; one per cycle leaves room for manual refreshes.
    "poll_interval_minutes": 3,
    "github_api_url": "https://api.github.com",
    "request_timeout": 30,
    "page_sizes": DEFAULT_PAGE_SIZES,
    "notifier": "console",  # console | macos
    "store": "sqlite",  # sqlite | gist | memory
    "store_path": "~/.reviewping.db",
}


def load_config(config_path: str = ".reviewping.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewping.yml in the current directory
      3. CLI argument overrides

    The token is resolved last, against the final github_api_url, and its
    origin is kept under github_token_source ("env", "gh" or None).
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        page_sizes = file_config.pop("page_sizes", None) or {}
        config.update(file_config)
        config["page_sizes"].update(page_sizes)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    token, source = resolve_github_token(config["github_api_url"])
    config["github_token"] = token
    config["github_token_source"] = source

    return config


def github_host(api_url: str) -> str:
    """Map an API base url to the host `gh` knows it by.

    https://api.github.com -> github.com; a GitHub Enterprise url such as
    https://ghe.example.com/api/v3 -> ghe.example.com.
    """
    host = urlparse(api_url).hostname or "github.com"
    return "github.com" if host == "api.github.com" else host


def resolve_github_token(api_url: str = "https://api.github.com") -> tuple[Optional[str], Optional[str]]:
    """Return (token, source) for the poller, or (None, None).

    Only reuses a credential the user already has: GITHUB_TOKEN first, then
    the GitHub CLI session for the host the GraphQL query goes to. Never raises.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        logger.debug("Using GitHub token from GITHUB_TOKEN.")
        return token, "env"

    host = github_host(api_url)
    try:
        result = subprocess.run(
            ["gh", "auth", "token", "--hostname", host],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable for %s: %s", host, e)
        return None, None

    token = result.stdout.strip() if result.returncode == 0 else ""
    if not token:
        logger.debug("gh CLI has no session for %s.", host)
        return None, None
    logger.debug("Using GitHub token from the gh CLI session for %s.", host)
    return token, "gh"
