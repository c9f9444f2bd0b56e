"""Shared fixtures for sync service tests."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Generator

import pytest

from ledger_mirror.content import ContentFetcher
from ledger_mirror.storage import ProgressCursor, SQLiteCounterStore, SQLiteInodeStore
from ledger_mirror.sync import SyncConfig, SyncService
from tests.ledger_mirror.helpers import NAMESPACE, MockContentStore, MockLedger


@pytest.fixture
def ledger() -> MockLedger:
    """Empty mock ledger."""
    return MockLedger()


@pytest.fixture
def content_store() -> MockContentStore:
    """Empty mock content store."""
    return MockContentStore()


@pytest.fixture
def inodes() -> Generator[SQLiteInodeStore, None, None]:
    """In-memory cache."""
    store = SQLiteInodeStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def counters() -> Generator[SQLiteCounterStore, None, None]:
    """In-memory cursor storage."""
    store = SQLiteCounterStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def service_factory(
    ledger: MockLedger,
    content_store: MockContentStore,
    inodes: SQLiteInodeStore,
    counters: SQLiteCounterStore,
) -> Callable[..., SyncService]:
    """Factory for sync services over the shared fixtures."""

    def _create(namespace: str = NAMESPACE, **overrides: float) -> SyncService:
        config = SyncConfig(**{"fetch_timeout": 0.05, "poll_interval": 0.01, **overrides})  # type: ignore[arg-type]
        clock = itertools.count(1_700_000_000_000)
        return SyncService(
            namespace=namespace,
            ledger=ledger,
            fetcher=ContentFetcher(content_store),
            store=inodes,
            cursor=ProgressCursor(counters, namespace),
            config=config,
            clock=lambda: next(clock),
        )

    return _create


@pytest.fixture
def service(service_factory: Callable[..., SyncService]) -> SyncService:
    """Sync service with short timeouts."""
    return service_factory()
