"""GistStore - poller state kept in a private GitHub Gist.

Useful when the same account is polled from more than one machine: the
seen-set follows the user, so switching laptops does not re-notify every
pending pull request.

Data format: a single JSON object in a file named `reviewping_state.json`
inside the Gist, mapping store keys to values.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from reviewping_store.base import BaseStore, StorageError

logger = logging.getLogger(__name__)

GIST_FILENAME = "reviewping_state.json"


class GistStore(BaseStore):
    """Stores poller state as one JSON document in a Gist.

    Reads never raise: an unreachable or malformed Gist reads as empty, which
    at worst re-notifies pending pull requests. Writes raise StorageError.

    The Gist ID is stored in .reviewping.yml under `gist_id`. Running
    `reviewping init` creates the Gist and writes the ID automatically.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStore. Install reviewping.")
        self._gist_id = gist_id
        self._gh = Github(token)

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def get(self, keys: Iterable[str]) -> dict[str, Any]:
        try:
            state = self._read_state(self._get_gist())
        except Exception as e:
            logger.warning("GistStore.get() failed: %s", e)
            return {}
        return {k: state[k] for k in keys if k in state}

    def set(self, entries: dict[str, Any]) -> None:
        try:
            from github import InputFileContent

            gist = self._get_gist()
            state = self._read_state(gist)
            state.update(entries)
            gist.edit(files={GIST_FILENAME: InputFileContent(json.dumps(state, indent=2))})
        except Exception as e:
            raise StorageError(f"Could not write to Gist {self._gist_id} ({type(e).__name__}: {e})") from e

    @staticmethod
    def _read_state(gist) -> dict:
        """Read the JSON object from the Gist file, or return {}."""
        file_obj = gist.files.get(GIST_FILENAME)
        if file_obj is None:
            return {}
        try:
            state = json.loads(file_obj.content)
        except (json.JSONDecodeError, TypeError, AttributeError):
            return {}
        return state if isinstance(state, dict) else {}
