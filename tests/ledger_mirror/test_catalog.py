"""Tests for the catalog facade."""

from __future__ import annotations

from pathlib import Path

from ledger_mirror.catalog import CURSOR_DB_NAME, Catalog
from ledger_mirror.ledger import InMemoryLedger
from ledger_mirror.publish import Publisher
from ledger_mirror.sync import SyncConfig, SyncState
from tests.ledger_mirror.helpers import (
    CREATOR,
    NAMESPACE,
    MockContentStore,
    RecordingObserver,
    make_metadata,
)

CONFIG = SyncConfig(fetch_timeout=0.05, poll_interval=0.01)


async def publish_titles(
    content_store: MockContentStore, ledger: InMemoryLedger, *titles: str
) -> list[str]:
    """Publish one record per title. Returns their content ids."""
    publisher = Publisher(content_store, ledger)
    return [await publisher.publish(make_metadata(title)) for title in titles]


class TestCatalog:
    """End-to-end publish, sync and browse."""

    async def test_publish_sync_and_browse(self, tmp_path: Path) -> None:
        """Published records become searchable after a sync."""
        content_store = MockContentStore()
        ledger = InMemoryLedger(creator=CREATOR)
        content_ids = await publish_titles(
            content_store, ledger, "Monthly Report", "Invoice", "Annual Report"
        )

        catalog = Catalog.open(NAMESPACE, ledger, content_store, tmp_path, CONFIG)
        try:
            state = await catalog.start_sync(RecordingObserver())

            assert state == SyncState(num_synced=3, total=3)
            assert catalog.search("report").total == 2
            assert catalog.latest(limit=10).total == 3

            record = catalog.get_file_metadata(content_ids[1])
            assert record is not None
            assert record.title == "Invoice"
            assert record.author == CREATOR
        finally:
            catalog.close()

        assert (tmp_path / f"inodes-{NAMESPACE}.db").exists()
        assert (tmp_path / CURSOR_DB_NAME).exists()

    async def test_progress_survives_reopen(self, tmp_path: Path) -> None:
        """A reopened catalog resumes from its persisted cursor."""
        content_store = MockContentStore()
        ledger = InMemoryLedger(creator=CREATOR)
        await publish_titles(content_store, ledger, "First", "Second")

        catalog = Catalog.open(NAMESPACE, ledger, content_store, tmp_path, CONFIG)
        await catalog.start_sync(RecordingObserver())
        catalog.close()

        await publish_titles(content_store, ledger, "Third")
        content_store.cat_log.clear()

        catalog = Catalog.open(NAMESPACE, ledger, content_store, tmp_path, CONFIG)
        try:
            assert await catalog.get_sync_state() == SyncState(num_synced=2, total=3)

            observer = RecordingObserver()
            await catalog.start_sync(observer)

            assert len(content_store.cat_log) == 1
            assert [update.record.title for update in observer.successes] == ["Third"]
            assert catalog.latest().total == 3
        finally:
            catalog.close()

    async def test_clear_data(self, tmp_path: Path) -> None:
        """Clearing drops the cache and rewinds the cursor together."""
        content_store = MockContentStore()
        ledger = InMemoryLedger(creator=CREATOR)
        await publish_titles(content_store, ledger, "Report")

        catalog = Catalog.open(NAMESPACE, ledger, content_store, tmp_path, CONFIG)
        try:
            await catalog.start_sync(RecordingObserver())

            catalog.clear_data()

            assert catalog.latest().total == 0
            assert await catalog.get_sync_state() == SyncState(num_synced=0, total=1)
        finally:
            catalog.close()

    async def test_addresses_are_isolated(self, tmp_path: Path) -> None:
        """Two ledgers in one data directory keep separate caches and cursors."""
        content_store = MockContentStore()
        first_ledger = InMemoryLedger(creator=CREATOR)
        second_ledger = InMemoryLedger(creator=CREATOR)
        await publish_titles(content_store, first_ledger, "Alpha", "Beta")

        first = Catalog.open("0xaaa", first_ledger, content_store, tmp_path, CONFIG)
        second = Catalog.open("0xbbb", second_ledger, content_store, tmp_path, CONFIG)
        try:
            await first.start_sync(RecordingObserver())

            assert first.latest().total == 2
            assert second.latest().total == 0
            assert await second.get_sync_state() == SyncState(num_synced=0, total=0)
        finally:
            first.close()
            second.close()

    def test_stop_sync_without_run(self, tmp_path: Path) -> None:
        """Stopping when nothing runs is harmless."""
        catalog = Catalog.open(NAMESPACE, InMemoryLedger(), MockContentStore(), tmp_path)
        try:
            catalog.stop_sync()
            assert catalog.sync.stopping
        finally:
            catalog.close()
