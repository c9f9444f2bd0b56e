"""
Incremental ledger synchronization.

What Is Sync?
-------------
The ledger only grows. Sync pages through entries the local cache has not seen
yet, resolves each entry's metadata record from the content store, and inserts
it into the cache. A persisted cursor makes runs resumable.

How It Works
------------
- Read the ledger size, start at the cursor
- Fetch entries in chunks of CHUNK_SIZE
- Mirror each chunk's entries concurrently, each fetch bounded by FETCH_TIMEOUT
- Optionally poll for new entries every POLL_INTERVAL
"""

from __future__ import annotations

__all__ = [
    # Main service
    "SyncService",
    "SyncState",
    "SyncUpdate",
    "SyncObserver",
    # States
    "SyncPhase",
    # Configuration
    "SyncConfig",
    "CHUNK_SIZE",
    "FETCH_TIMEOUT",
    "POLL_INTERVAL",
]

from .config import CHUNK_SIZE, FETCH_TIMEOUT, POLL_INTERVAL, SyncConfig
from .service import SyncObserver, SyncService, SyncState, SyncUpdate
from .states import SyncPhase
