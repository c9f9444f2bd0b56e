"""
Abstract storage interfaces for the local mirror.

Defines the Protocols that storage implementations must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ledger_mirror.records import Inode
    from ledger_mirror.types import Pageable


class InodeStore(Protocol):
    """
    Protocol for the indexed local cache of mirrored records.

    Storage Organization
    --------------------
    - Records keyed by content identifier
    - Insertion order kept for substring search results
    - Creation-time index for browsing newest additions
    """

    def insert(self, inode: Inode) -> None:
        """
        Add a record.

        Raises:
            DuplicateKey: If a record with the same id is already stored.
            StoreError: If the backend fails to write the record.
        """
        ...

    def get_by_id(self, content_id: str) -> Inode | None:
        """Retrieve a record by id, or None if absent."""
        ...

    def has(self, content_id: str) -> bool:
        """Check if a record exists."""
        ...

    def count(self) -> int:
        """Return the number of stored records."""
        ...

    def search(self, query: str, limit: int = 10, offset: int = 0) -> Pageable[Inode]:
        """
        Case-insensitive substring match of the normalized query against titles.

        Args:
            query: Search text. Lower-cased, trimmed and whitespace-collapsed.
            limit: Page size.
            offset: Index of the first match on the page.
        """
        ...

    def latest(self, limit: int = 10, offset: int = 0) -> Pageable[Inode]:
        """Page through records ordered by creation time, oldest first."""
        ...

    def clear(self) -> None:
        """Drop all records. Does not touch any progress cursor."""
        ...

    def close(self) -> None:
        """Close the store and release resources."""
        ...


class CounterStore(Protocol):
    """
    Protocol for namespaced persisted counters.

    Values must survive process restarts.
    """

    def get(self, key: str) -> int | None:
        """Return the counter value, or None if unset."""
        ...

    def set(self, key: str, value: int) -> None:
        """Persist a counter value."""
        ...

    def delete(self, key: str) -> None:
        """Remove a counter. No-op if unset."""
        ...

    def close(self) -> None:
        """Close the store and release resources."""
        ...
