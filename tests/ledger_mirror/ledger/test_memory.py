"""Tests for the in-memory ledger."""

from __future__ import annotations

import pytest

from ledger_mirror.ledger import InMemoryLedger
from tests.ledger_mirror.helpers import CREATOR, make_chain_id


class TestInMemoryLedger:
    """Tests for InMemoryLedger reads and appends."""

    async def test_empty(self) -> None:
        """A new ledger has no entries."""
        ledger = InMemoryLedger()
        assert await ledger.entry_count() == 0
        assert await ledger.get_range(10, 0) == []

    async def test_append_uses_configured_creator(self) -> None:
        """Appended entries carry the ledger's creator address."""
        ledger = InMemoryLedger(creator=CREATOR)

        await ledger.append(make_chain_id(1))

        [entry] = await ledger.get_range(1, 0)
        assert entry.content_id == make_chain_id(1)
        assert entry.creator == CREATOR
        assert entry.timestamp > 0

    async def test_get_range_windows(self) -> None:
        """Ranges are clipped to the ledger's end."""
        ledger = InMemoryLedger()
        for seed in range(5):
            ledger.add_entry(make_chain_id(seed), creator=CREATOR, timestamp=seed)

        middle = await ledger.get_range(2, 1)
        tail = await ledger.get_range(10, 3)

        assert [entry.timestamp for entry in middle] == [1, 2]
        assert [entry.timestamp for entry in tail] == [3, 4]
        assert await ledger.get_range(10, 5) == []

    async def test_negative_range_rejected(self) -> None:
        """Negative counts or offsets are rejected."""
        with pytest.raises(ValueError):
            await InMemoryLedger().get_range(-1, 0)
