"""Tests for the timeout-bounded content fetcher."""

from __future__ import annotations

import pytest

from ledger_mirror.content import ContentFetcher
from ledger_mirror.errors import ContentUnavailable
from tests.ledger_mirror.helpers import MockContentStore


@pytest.fixture
def store() -> MockContentStore:
    """Empty mock content store."""
    return MockContentStore()


class TestContentFetcher:
    """Tests for ContentFetcher.fetch."""

    async def test_returns_payload(self, store: MockContentStore) -> None:
        """A payload that arrives in time is returned as-is."""
        content_id = store.put(b"payload")

        assert await ContentFetcher(store).fetch(content_id, 1.0) == b"payload"

    async def test_timeout_returns_none(self, store: MockContentStore) -> None:
        """A fetch that never completes yields None once the timer fires."""
        content_id = store.put(b"payload")
        store.hanging.add(content_id)

        assert await ContentFetcher(store).fetch(content_id, 0.01) is None

    async def test_store_failure_wrapped(self, store: MockContentStore) -> None:
        """Arbitrary store failures surface as ContentUnavailable."""
        content_id = store.put(b"payload")
        store.failing.add(content_id)

        with pytest.raises(ContentUnavailable, match="connection reset") as exc_info:
            await ContentFetcher(store).fetch(content_id, 1.0)

        assert exc_info.value.content_id == content_id
        assert exc_info.value.timed_out is False
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_not_found_wrapped(self, store: MockContentStore) -> None:
        """A missing payload surfaces as ContentUnavailable."""
        with pytest.raises(ContentUnavailable, match="Error fetching metafile QmMissing"):
            await ContentFetcher(store).fetch("QmMissing", 1.0)

    async def test_content_unavailable_passes_through(self) -> None:
        """Errors already in the sync vocabulary are not re-wrapped."""

        class FailingStore:
            async def cat(self, content_id: str) -> bytes:
                raise ContentUnavailable(content_id, "HTTP 404")

            async def add(self, data: bytes) -> str:
                raise NotImplementedError

        with pytest.raises(ContentUnavailable) as exc_info:
            await ContentFetcher(FailingStore()).fetch("QmX", 1.0)

        assert exc_info.value.detail == "HTTP 404"
        assert exc_info.value.__cause__ is None
