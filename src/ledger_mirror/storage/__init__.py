"""
Storage module for the local mirror.

Provides the inode cache and the persisted sync cursor.
Uses SQLite for simplicity and correctness.
"""

from .cursor import CURSOR_KEY_PREFIX, ProgressCursor
from .database import CounterStore, InodeStore
from .namespaces import COUNTERS, INODES, CounterNamespace, InodeNamespace
from .sqlite import SQLiteCounterStore, SQLiteInodeStore, normalize_query

__all__ = [
    "COUNTERS",
    "CURSOR_KEY_PREFIX",
    "CounterNamespace",
    "CounterStore",
    "INODES",
    "InodeNamespace",
    "InodeStore",
    "ProgressCursor",
    "SQLiteCounterStore",
    "SQLiteInodeStore",
    "normalize_query",
]
