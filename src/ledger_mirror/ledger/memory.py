"""In-process ledger backed by a list."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .interface import LedgerEntry


@dataclass(slots=True)
class InMemoryLedger:
    """
    Append-only ledger held in memory.

    Satisfies both LedgerReader and LedgerWriter. Useful for local runs and as a
    stand-in for a remote ledger in tests.
    """

    creator: str = "0x0000000000000000000000000000000000000000"
    """Address recorded as the creator of entries appended via `append`."""

    entries: list[LedgerEntry] = field(default_factory=list)
    """Entries in ledger order."""

    async def entry_count(self) -> int:
        """Return the current number of entries."""
        return len(self.entries)

    async def get_range(self, count: int, offset: int) -> list[LedgerEntry]:
        """Return up to ``count`` entries starting at ``offset``."""
        if count < 0 or offset < 0:
            raise ValueError(f"Invalid range: count={count}, offset={offset}")
        return self.entries[offset : offset + count]

    async def append(self, content_id: str) -> None:
        """Append an identifier under the configured creator."""
        self.add_entry(content_id, creator=self.creator)

    def add_entry(self, content_id: str, *, creator: str, timestamp: int | None = None) -> None:
        """Append an entry with an explicit creator and timestamp."""
        self.entries.append(
            LedgerEntry(
                content_id=content_id,
                creator=creator,
                timestamp=int(time.time()) if timestamp is None else timestamp,
            )
        )
