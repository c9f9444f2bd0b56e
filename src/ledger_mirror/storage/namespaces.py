"""
Database namespace definitions for storage tables.

Defines table names and schema constants for SQLite storage.
Each namespace represents a logical grouping of related data.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InodeNamespace:
    """
    Namespace for mirrored file listings.

    Rows are keyed by the content store identifier of the metadata record.
    The implicit rowid preserves insertion order, which is the order search
    results are returned in.
    """

    TABLE_NAME: str = "inodes"
    """Table name for inode storage."""

    COLUMNS: tuple[str, ...] = (
        "id",
        "title",
        "description",
        "category",
        "created_at",
        "mime_type",
        "size_bytes",
        "author",
        "data_uri",
    )
    """Column order used by inserts and selects."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS inodes (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            category TEXT NOT NULL,
            created_at INTEGER NOT NULL,
            mime_type TEXT NOT NULL,
            size_bytes INTEGER NOT NULL,
            author TEXT NOT NULL,
            data_uri TEXT NOT NULL
        )
    """
    """SQL to create inodes table."""

    CREATE_INDEX: str = """
        CREATE INDEX IF NOT EXISTS idx_inodes_created_at ON inodes(created_at)
    """
    """SQL to create creation-time index used by `latest`."""


@dataclass(frozen=True, slots=True)
class CounterNamespace:
    """
    Namespace for persisted counters.

    Key-value pattern: one row per sync namespace.
    """

    TABLE_NAME: str = "counters"
    """Table name for counter storage."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS counters (
            key TEXT PRIMARY KEY,
            value INTEGER NOT NULL
        )
    """
    """SQL to create counters table."""


# Singleton instances for convenient access
INODES = InodeNamespace()
COUNTERS = CounterNamespace()
