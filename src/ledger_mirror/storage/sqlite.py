"""
SQLite implementations of the storage protocols.

Two independent stores:

- `SQLiteInodeStore` holds the mirrored records and answers browse queries.
- `SQLiteCounterStore` holds the sync cursors.

They are deliberately separate so that dropping the cache does not rewind
synchronization, and resetting a cursor does not discard cached records.
Both accept ":memory:" for an in-memory database.
"""

from __future__ import annotations

import contextlib
import logging
import re
import sqlite3
from pathlib import Path

from ledger_mirror.errors import DuplicateKey, StoreError
from ledger_mirror.records import Inode
from ledger_mirror.types import Pageable

from .namespaces import COUNTERS, INODES

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

_UINT64_SIGN_BIT = 1 << 63
_UINT64_RANGE = 1 << 64


def normalize_query(query: str) -> str:
    """Lower-case, trim and collapse internal whitespace runs to one space."""
    return _WHITESPACE.sub(" ", query.lower().strip())


def _connect(path: Path | str) -> sqlite3.Connection:
    # check_same_thread=False lets worker threads share the connection.
    # SQLite serializes writes internally.
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def _check_window(limit: int, offset: int) -> None:
    if limit < 0 or offset < 0:
        raise ValueError(f"limit and offset must be non-negative (got {limit}, {offset})")


class SQLiteInodeStore:
    """
    SQLite implementation of the InodeStore protocol.

    Search results come back in insertion (rowid) order. Browsing by creation
    time breaks ties on rowid so that pages never overlap or skip records.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize the store, creating tables if they don't exist.

        Args:
            path: Path to SQLite database file, or ":memory:".
        """
        self._path = Path(path) if isinstance(path, str) else path
        self._conn = _connect(self._path)

        # SQLite's lower() only folds ASCII. Titles are folded with Python's
        # str.lower so they match the query normalization exactly.
        self._conn.create_function("py_lower", 1, _py_lower, deterministic=True)

        self._init_schema()

    def _init_schema(self) -> None:
        cursor = self._conn.cursor()
        cursor.execute(INODES.CREATE_TABLE)
        cursor.execute(INODES.CREATE_INDEX)
        self._conn.commit()

    @staticmethod
    def _to_inode(row: sqlite3.Row) -> Inode:
        fields = {column: row[column] for column in INODES.COLUMNS}
        fields["size_bytes"] = _from_signed64(fields["size_bytes"])
        return Inode(**fields)

    @staticmethod
    def _to_row(inode: Inode) -> tuple[object, ...]:
        fields = {column: getattr(inode, column) for column in INODES.COLUMNS}
        fields["size_bytes"] = _to_signed64(fields["size_bytes"])
        return tuple(fields[column] for column in INODES.COLUMNS)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, inode: Inode) -> None:
        """Add a record, failing on a duplicate id."""
        columns = ", ".join(INODES.COLUMNS)
        placeholders = ", ".join("?" for _ in INODES.COLUMNS)

        # Plain INSERT: the primary key constraint rejects re-inserts.
        #
        # Silently replacing would hide a resumability bug in the caller.
        try:
            self._conn.execute(
                f"INSERT INTO {INODES.TABLE_NAME} ({columns}) VALUES ({placeholders})",
                self._to_row(inode),
            )
        except sqlite3.IntegrityError as exc:
            self._conn.rollback()
            raise DuplicateKey(inode.id) from exc
        except (sqlite3.Error, OverflowError) as exc:
            # The connection itself may be unusable (e.g. closed).
            with contextlib.suppress(sqlite3.Error):
                self._conn.rollback()
            raise StoreError(inode.id, str(exc) or type(exc).__name__) from exc
        self._conn.commit()

    def clear(self) -> None:
        """Drop all records."""
        self._conn.execute(f"DELETE FROM {INODES.TABLE_NAME}")
        self._conn.commit()
        logger.info("Cleared inode cache at %s", self._path)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, content_id: str) -> Inode | None:
        """Retrieve a record by id."""
        row = self._conn.execute(
            f"SELECT * FROM {INODES.TABLE_NAME} WHERE id = ?",
            (content_id,),
        ).fetchone()
        return None if row is None else self._to_inode(row)

    def has(self, content_id: str) -> bool:
        """Check if a record exists."""
        row = self._conn.execute(
            f"SELECT 1 FROM {INODES.TABLE_NAME} WHERE id = ?",
            (content_id,),
        ).fetchone()
        return row is not None

    def count(self) -> int:
        """Return the number of stored records."""
        return self._conn.execute(f"SELECT COUNT(*) FROM {INODES.TABLE_NAME}").fetchone()[0]

    def search(self, query: str, limit: int = 10, offset: int = 0) -> Pageable[Inode]:
        """Page through records whose title contains the normalized query."""
        _check_window(limit, offset)
        needle = normalize_query(query)

        # instr() > 0 is a literal substring test.
        #
        # LIKE would treat '%' and '_' in the query as wildcards.
        where = "WHERE instr(py_lower(title), ?) > 0"

        total = self._conn.execute(
            f"SELECT COUNT(*) FROM {INODES.TABLE_NAME} {where}",
            (needle,),
        ).fetchone()[0]
        rows = self._conn.execute(
            f"SELECT * FROM {INODES.TABLE_NAME} {where} ORDER BY rowid LIMIT ? OFFSET ?",
            (needle, limit, offset),
        ).fetchall()

        return Pageable.slice([self._to_inode(row) for row in rows], total, offset)

    def latest(self, limit: int = 10, offset: int = 0) -> Pageable[Inode]:
        """Page through records ordered by creation time, oldest first."""
        _check_window(limit, offset)

        total = self.count()
        rows = self._conn.execute(
            f"SELECT * FROM {INODES.TABLE_NAME} ORDER BY created_at, rowid LIMIT ? OFFSET ?",
            (limit, offset),
        ).fetchall()

        return Pageable.slice([self._to_inode(row) for row in rows], total, offset)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self) -> SQLiteInodeStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()


class SQLiteCounterStore:
    """SQLite implementation of the CounterStore protocol."""

    def __init__(self, path: Path | str) -> None:
        """
        Args:
            path: Path to SQLite database file, or ":memory:".
        """
        self._path = Path(path) if isinstance(path, str) else path
        self._conn = _connect(self._path)
        self._conn.execute(COUNTERS.CREATE_TABLE)
        self._conn.commit()

    def get(self, key: str) -> int | None:
        """Return the counter value, or None if unset."""
        row = self._conn.execute(
            f"SELECT value FROM {COUNTERS.TABLE_NAME} WHERE key = ?",
            (key,),
        ).fetchone()
        return None if row is None else int(row["value"])

    def set(self, key: str, value: int) -> None:
        """Persist a counter value."""
        # Commit immediately: a crash right after must not rewind the cursor.
        self._conn.execute(
            f"INSERT OR REPLACE INTO {COUNTERS.TABLE_NAME} (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        """Remove a counter."""
        self._conn.execute(f"DELETE FROM {COUNTERS.TABLE_NAME} WHERE key = ?", (key,))
        self._conn.commit()

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self) -> SQLiteCounterStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()


def _py_lower(value: str | None) -> str | None:
    return None if value is None else value.lower()


def _to_signed64(value: int) -> int:
    # sizeBytes is a uint64 but SQLite INTEGER is signed 64-bit.
    # Values past the sign bit are stored as their two's complement.
    return value - _UINT64_RANGE if value >= _UINT64_SIGN_BIT else value


def _from_signed64(value: int) -> int:
    return value + _UINT64_RANGE if value < 0 else value
