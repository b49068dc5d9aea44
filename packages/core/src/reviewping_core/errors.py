"""Errors raised by reviewping_core I/O boundaries.

Filtering, classification and dedup are pure and never raise; only the data
source does. Storage failures are defined next to the stores in
reviewping_store.base.
"""

from __future__ import annotations


class FetchError(RuntimeError):
    """The GitHub API could not be reached or answered with an error payload."""
