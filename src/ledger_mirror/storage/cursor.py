"""
Durable sync progress counter.

The cursor records how many ledger entries have been attempted for one sync
namespace. It counts attempts, not successes: an entry whose payload could not
be fetched or decoded still moves the cursor, so it is never retried on resume.

The value lives in a `CounterStore`, outside the inode cache. Clearing the
cache leaves the cursor alone unless the caller resets it too.
"""

from __future__ import annotations

import logging
import threading

from .database import CounterStore

logger = logging.getLogger(__name__)

CURSOR_KEY_PREFIX = "inodes-index-"
"""Prefix of the counter key. The ledger address completes it."""


class ProgressCursor:
    """
    Namespaced, monotonically increasing attempt counter.

    `advance` is safe to call from concurrently completing tasks and threads:
    the read-increment-write sequence runs under a lock.
    """

    def __init__(self, store: CounterStore, namespace: str) -> None:
        """
        Args:
            store: Persisted counter storage.
            namespace: Sync namespace, derived from the ledger's address.
        """
        self.store = store
        self.namespace = namespace
        self._lock = threading.Lock()

    @property
    def key(self) -> str:
        """Counter key under which the value is persisted."""
        return f"{CURSOR_KEY_PREFIX}{self.namespace}"

    def load(self) -> int:
        """Return the persisted value, or 0 if none was stored."""
        value = self.store.get(self.key)
        return 0 if value is None else value

    def advance(self) -> int:
        """Increment and persist the counter, returning the new value."""
        with self._lock:
            value = self.load() + 1
            self.store.set(self.key, value)
        return value

    def reset(self) -> None:
        """Delete the persisted counter."""
        with self._lock:
            self.store.delete(self.key)
        logger.info("Reset sync cursor %s", self.key)
