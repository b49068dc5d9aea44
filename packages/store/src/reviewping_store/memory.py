"""In-process store - nothing survives the process.

Used by ``reviewping check --dry-run`` and as the fallback when a configured
backend is missing its settings.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable

from reviewping_store.base import BaseStore


class MemoryStore(BaseStore):
    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, keys: Iterable[str]) -> dict[str, Any]:
        return {k: copy.deepcopy(self._data[k]) for k in keys if k in self._data}

    def set(self, entries: dict[str, Any]) -> None:
        self._data.update(copy.deepcopy(entries))
