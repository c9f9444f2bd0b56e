"""
Catalog facade: one ledger, mirrored and browsable.

Wires the cache, the cursor, the fetcher and the sync service together for a
single ledger address. Applications talk to this instead of the parts.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .content import ContentFetcher, ContentStore
from .ledger import LedgerReader
from .records import Inode
from .storage import (
    CounterStore,
    InodeStore,
    ProgressCursor,
    SQLiteCounterStore,
    SQLiteInodeStore,
)
from .sync import SyncConfig, SyncObserver, SyncService, SyncState
from .types import Pageable

logger = logging.getLogger(__name__)

CURSOR_DB_NAME = "cursors.db"
"""File name of the shared cursor database inside the data directory."""


class Catalog:
    """Local, queryable mirror of one ledger."""

    def __init__(
        self,
        address: str,
        ledger: LedgerReader,
        content_store: ContentStore,
        store: InodeStore,
        counters: CounterStore,
        config: SyncConfig | None = None,
    ) -> None:
        """
        Args:
            address: Ledger address. Namespaces the cache and the cursor.
            ledger: Source of ledger entries.
            content_store: Where metadata records are fetched from.
            store: Local cache of mirrored records.
            counters: Persisted counter storage for the cursor.
            config: Optional sync parameter overrides.
        """
        self.address = address
        self.store = store
        self.counters = counters
        self.sync = SyncService(
            namespace=address,
            ledger=ledger,
            fetcher=ContentFetcher(content_store),
            store=store,
            cursor=ProgressCursor(counters, address),
            config=config or SyncConfig(),
        )

    @classmethod
    def open(
        cls,
        address: str,
        ledger: LedgerReader,
        content_store: ContentStore,
        data_dir: Path | str,
        config: SyncConfig | None = None,
    ) -> Catalog:
        """
        Open a catalog backed by SQLite files under ``data_dir``.

        The cache lives in ``inodes-<address>.db``; cursors share ``cursors.db``.
        """
        data_dir = Path(data_dir)
        data_dir.mkdir(parents=True, exist_ok=True)

        store = SQLiteInodeStore(data_dir / f"inodes-{address}.db")
        counters = SQLiteCounterStore(data_dir / CURSOR_DB_NAME)
        logger.debug("Opened catalog for %s in %s", address, data_dir)
        return cls(address, ledger, content_store, store, counters, config)

    async def get_sync_state(self) -> SyncState:
        """Current progress against the live ledger count."""
        return await self.sync.get_sync_state()

    async def start_sync(self, observer: SyncObserver, poll: bool = False) -> SyncState:
        """Mirror new ledger entries. See `SyncService.start_sync`."""
        return await self.sync.start_sync(observer, poll=poll)

    def stop_sync(self) -> None:
        """Ask a running sync to stop at its next checkpoint."""
        self.sync.stop()

    def search(self, query: str, limit: int = 10, offset: int = 0) -> Pageable[Inode]:
        """Substring search over titles."""
        return self.store.search(query, limit, offset)

    def latest(self, limit: int = 10, offset: int = 0) -> Pageable[Inode]:
        """Browse by ingestion time, oldest first."""
        return self.store.latest(limit, offset)

    def get_file_metadata(self, content_id: str) -> Inode | None:
        """Look up one mirrored record."""
        return self.store.get_by_id(content_id)

    def clear_data(self) -> None:
        """Drop the cache and rewind the cursor together."""
        self.sync.clear_data()

    def close(self) -> None:
        """Close the cache and cursor stores."""
        self.store.close()
        self.counters.close()
