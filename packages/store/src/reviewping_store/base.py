"""Abstract key/value store interface.

The poller persists a handful of JSON-serialisable values between cycles
(the seen-set, the unreviewed list, the last error). Any backend that can
read and write those keys implements BaseStore; the orchestrator only ever
calls get() and set().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable


class StorageError(RuntimeError):
    """A store could not persist values."""


class BaseStore(ABC):
    """Pluggable persistence layer for cross-cycle poller state."""

    @abstractmethod
    def get(self, keys: Iterable[str]) -> dict[str, Any]:
        """Return the stored values for ``keys``.

        Keys that have never been written are absent from the result.
        """

    @abstractmethod
    def set(self, entries: dict[str, Any]) -> None:
        """Write all ``entries`` at once. Raises StorageError on failure."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional - subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
