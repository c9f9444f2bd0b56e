"""Tests for publishing listings."""

from __future__ import annotations

import pytest

from ledger_mirror.address import to_chain_encoded
from ledger_mirror.errors import MalformedIdentifier
from ledger_mirror.ledger import InMemoryLedger
from ledger_mirror.publish import Publisher
from ledger_mirror.records import decode_record
from tests.ledger_mirror.helpers import CREATOR, MockContentStore, make_metadata


@pytest.fixture
def content_store() -> MockContentStore:
    """Empty mock content store."""
    return MockContentStore()


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty ledger appending as the test creator."""
    return InMemoryLedger(creator=CREATOR)


class TestPublish:
    """Tests for Publisher.publish."""

    async def test_stores_record_and_appends(
        self, content_store: MockContentStore, ledger: InMemoryLedger
    ) -> None:
        """The encoded record is stored and its on-chain id appended."""
        metadata = make_metadata("Report")

        content_id = await Publisher(content_store, ledger).publish(metadata)

        assert decode_record(content_store.blobs[content_id]) == metadata
        [entry] = ledger.entries
        assert entry.content_id == to_chain_encoded(content_id)
        assert entry.creator == CREATOR

    async def test_rejects_foreign_identifier(self, ledger: InMemoryLedger) -> None:
        """A content store handing back a non-sha2-256 id is not appended."""

        class OddStore:
            async def cat(self, content_id: str) -> bytes:
                raise NotImplementedError

            async def add(self, data: bytes) -> str:
                return "bafkreigh2akiscaildc"

        with pytest.raises(MalformedIdentifier):
            await Publisher(OddStore(), ledger).publish(make_metadata())

        assert ledger.entries == []


class TestFiles:
    """Tests for raw file upload and download."""

    async def test_add_and_get_file(
        self, content_store: MockContentStore, ledger: InMemoryLedger
    ) -> None:
        """Uploaded bytes come back unchanged and nothing is appended."""
        publisher = Publisher(content_store, ledger)

        content_id = await publisher.add_file(b"%PDF-1.7 ...")

        assert await publisher.get_file(content_id) == b"%PDF-1.7 ..."
        assert ledger.entries == []
