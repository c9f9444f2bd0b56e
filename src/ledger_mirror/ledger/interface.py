"""
Ledger read and write contracts.

The ledger is an append-only list of entries. Each entry records the on-chain
identifier of a metadata record, who appended it, and when. The sync engine
only reads from it; the publish path appends.

Uses structural subtyping: any class with matching methods satisfies the
protocol.
"""

from __future__ import annotations

from typing import Protocol

from ledger_mirror.types import StrictBaseModel


class LedgerEntry(StrictBaseModel):
    """One immutable ledger entry."""

    content_id: str
    """On-chain identifier: ``0x`` plus the 64-char hex digest."""

    creator: str
    """Address that appended the entry."""

    timestamp: int
    """Ledger timestamp of the append (seconds since the epoch)."""


class LedgerReader(Protocol):
    """Paginated read access to the ledger."""

    async def entry_count(self) -> int:
        """
        Return the current number of entries.

        Monotonically non-decreasing across calls.
        """
        ...

    async def get_range(self, count: int, offset: int) -> list[LedgerEntry]:
        """
        Return ``count`` entries starting at ``offset``, in ledger order.

        Args:
            count: Number of entries to return.
            offset: Index of the first entry.
        """
        ...


class LedgerWriter(Protocol):
    """Append access to the ledger."""

    async def append(self, content_id: str) -> None:
        """
        Append an on-chain identifier and wait until the write is final.

        Args:
            content_id: ``0x``-prefixed hex digest to append.
        """
        ...
