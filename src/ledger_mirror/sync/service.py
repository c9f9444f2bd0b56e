"""
Sync service orchestrator.

This is the main entry point for synchronization.

The Core Problem
----------------
The ledger is an append-only list of content identifiers. Each identifier
points at a metadata record in the content store. Browsing the catalog directly
would mean one ledger query plus one content fetch per listing. Instead we
mirror every record into a local cache once and serve reads from there.

How It Works
------------
1. Read the ledger's entry count
2. Page through entries past the persisted cursor, CHUNK_SIZE at a time
3. Within a chunk, process every entry concurrently:
   convert id -> advance cursor -> fetch payload -> decode -> insert
4. Wait for the whole chunk to settle before requesting the next one
5. Optionally wait POLL_INTERVAL and start over to pick up new entries

Progress Accounting
-------------------
The cursor is advanced before each fetch resolves. It counts attempts, so a
stalled or failing fetch never blocks forward progress and never gets retried
on resume. A payload that arrives after its timeout is discarded.

Because entries in a chunk race, observers may see notifications out of ledger
order. The ``num_synced`` reported with each notification is the number of
attempts issued so far, not the position of that entry.

State Machine
-------------
::

    IDLE --> FETCHING_TOTAL --> PAGING --> (POLLING | DONE)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ledger_mirror import metrics
from ledger_mirror.address import to_content_store_id
from ledger_mirror.content import ContentFetcher
from ledger_mirror.errors import (
    ContentUnavailable,
    DuplicateKey,
    LedgerMirrorError,
    LedgerUnreachable,
    MalformedIdentifier,
    SyncError,
    SyncInProgress,
)
from ledger_mirror.ledger import LedgerEntry, LedgerReader
from ledger_mirror.records import Inode, decode_record
from ledger_mirror.storage import InodeStore, ProgressCursor

from .config import SyncConfig
from .states import SyncPhase

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncState:
    """Snapshot of synchronization progress."""

    num_synced: int
    """Ledger entries attempted so far."""

    total: int
    """Ledger entry count at the time of the snapshot."""


@dataclass(frozen=True, slots=True)
class SyncUpdate:
    """Payload handed to the observer after each processed entry."""

    num_synced: int
    """Attempts issued so far in this namespace."""

    total: int
    """Ledger entry count observed by the current pass."""

    record: Inode | None = None
    """The inserted record. None when the entry failed."""


SyncObserver = Callable[[LedgerMirrorError | None, SyncUpdate], None]
"""Called once per processed entry with (error, update). Error is None on success."""


def _now_ms() -> int:
    return int(time.time() * 1000)


_ACTIVE_NAMESPACES: set[str] = set()
"""Namespaces with a run in progress in this process."""


@dataclass(slots=True)
class SyncService:
    """
    Mirrors one ledger into the local cache.

    The service does not own its collaborators. Ledger, content store, cache
    and cursor are injected, which keeps runs deterministic under test.

    Only one run per namespace may be in progress within a process. Separate
    processes sharing the same cursor store are not coordinated.
    """

    namespace: str
    """Sync namespace, derived from the ledger's address."""

    ledger: LedgerReader
    """Source of ledger entries."""

    fetcher: ContentFetcher
    """Timeout-bounded content retrieval."""

    store: InodeStore
    """Local cache receiving decoded records."""

    cursor: ProgressCursor
    """Persisted attempt counter."""

    config: SyncConfig = field(default_factory=SyncConfig)
    """Chunk size, fetch timeout and poll interval."""

    clock: Callable[[], int] = field(default=_now_ms)
    """Returns the ingestion timestamp (ms) stamped on inserted records."""

    _phase: SyncPhase = field(default=SyncPhase.IDLE)
    """Current run phase."""

    _num_synced: int = field(default=0)
    """Last cursor value seen by this service."""

    _total: int = field(default=0)
    """Last observed ledger entry count."""

    _stop_event: asyncio.Event = field(default_factory=asyncio.Event)
    """Set by `stop` to end the current run at the next checkpoint."""

    @property
    def phase(self) -> SyncPhase:
        """Current run phase."""
        return self._phase

    @property
    def stopping(self) -> bool:
        """Whether a stop has been requested."""
        return self._stop_event.is_set()

    def stop(self) -> None:
        """
        Ask the current run to end.

        Honored before each fetch, at chunk boundaries and during the poll wait.
        Entries already being fetched are allowed to settle.
        """
        self._stop_event.set()

    async def get_sync_state(self) -> SyncState:
        """
        Recompute progress from the ledger count and the persisted cursor.

        Raises:
            LedgerUnreachable: If the ledger count cannot be read.
        """
        self._total = await self._read_total()
        self._num_synced = self.cursor.load()
        return SyncState(num_synced=self._num_synced, total=self._total)

    def clear_data(self) -> None:
        """
        Drop every cached record and rewind the cursor to zero.

        Raises:
            SyncInProgress: If any service in this process is syncing the namespace.
        """
        if self.namespace in _ACTIVE_NAMESPACES:
            raise SyncInProgress(self.namespace)

        self.store.clear()
        self.cursor.reset()
        self._num_synced = 0
        metrics.entries_synced.set(0)

    async def start_sync(self, observer: SyncObserver, poll: bool = False) -> SyncState:
        """
        Run synchronization until caught up, or forever when polling.

        Args:
            observer: Receives one notification per processed entry.
            poll: Keep checking for new entries until `stop` is called.

        Returns:
            Progress at the end of the run.

        Raises:
            SyncInProgress: If this namespace is already syncing in this process.
            LedgerUnreachable: If the ledger cannot be read. The run aborts.
        """
        if self.namespace in _ACTIVE_NAMESPACES:
            raise SyncInProgress(self.namespace)

        _ACTIVE_NAMESPACES.add(self.namespace)
        self._stop_event.clear()

        try:
            while True:
                await self._sync_pass(observer)

                if not poll or self.stopping:
                    break

                self._transition_to(SyncPhase.POLLING)
                logger.debug("Polling %s for new entries...", self.namespace)

                # Sleep for the poll interval, waking early on stop.
                try:
                    await asyncio.wait_for(self._stop_event.wait(), self.config.poll_interval)
                except TimeoutError:
                    pass

                if self.stopping:
                    break

            self._transition_to(SyncPhase.IDLE if self.stopping else SyncPhase.DONE)
        except BaseException:
            self._phase = SyncPhase.IDLE
            raise
        finally:
            _ACTIVE_NAMESPACES.discard(self.namespace)

        logger.info(
            "Sync of %s finished: %d/%d entries attempted",
            self.namespace,
            self._num_synced,
            self._total,
        )
        return SyncState(num_synced=self._num_synced, total=self._total)

    async def _sync_pass(self, observer: SyncObserver) -> None:
        """Read the ledger size and page through every unsynced entry."""
        self._transition_to(SyncPhase.FETCHING_TOTAL)

        total = await self._read_total()
        num_synced = self.cursor.load()
        self._total, self._num_synced = total, num_synced
        metrics.ledger_total.set(total)
        metrics.entries_synced.set(num_synced)

        if total <= num_synced:
            return

        self._transition_to(SyncPhase.PAGING)
        logger.info("Syncing %s: entries %d..%d", self.namespace, num_synced, total)

        offset = num_synced
        while offset < total:
            if self.stopping:
                logger.info("Sync of %s stopped at offset %d", self.namespace, offset)
                return

            count = min(self.config.chunk_size, total - offset)
            entries = await self._read_range(count, offset)

            # Fan out the whole chunk, then wait for every entry to settle.
            #
            # The next page is not requested until this one is done. An
            # unexpected failure cancels the rest of the chunk before it
            # propagates, so no entry outlives the run.
            async with asyncio.TaskGroup() as tg:
                for entry in entries:
                    tg.create_task(self._process_entry(entry, observer))

            offset += count

    async def _process_entry(self, entry: LedgerEntry, observer: SyncObserver) -> None:
        """
        Mirror one ledger entry.

        Per-entry failures are reported to the observer and end processing of
        this entry only.
        """
        if self.stopping:
            return

        try:
            content_id = to_content_store_id(entry.content_id)
        except MalformedIdentifier as exc:
            # Corrupt ledger data. Count the attempt so resume moves past it.
            self._advance()
            logger.error("Skipping ledger entry with bad identifier: %s", exc)
            self._report_failure(observer, exc)
            return

        # Count the attempt before the fetch resolves.
        #
        # A stalled fetch must not hold back the cursor or be retried on resume.
        self._advance()

        try:
            payload = await self.fetcher.fetch(content_id, self.config.fetch_timeout)
            if payload is None:
                raise ContentUnavailable(
                    content_id,
                    f"timed out after {self.config.fetch_timeout}s",
                    timed_out=True,
                )

            metadata = decode_record(payload, content_id)
            inode = Inode.from_metadata(
                content_id,
                metadata,
                author=entry.creator,
                created_at=self.clock(),
            )
            self.store.insert(inode)
        except DuplicateKey as exc:
            logger.error("Resumability bug: %s", exc)
            self._report_failure(observer, exc)
            return
        except SyncError as exc:
            logger.warning("%s", exc)
            self._report_failure(observer, exc)
            return

        metrics.records_inserted.inc()
        logger.debug("Mirrored %s (%r)", content_id, inode.title)
        observer(None, SyncUpdate(num_synced=self._num_synced, total=self._total, record=inode))

    def _advance(self) -> None:
        self._num_synced = max(self._num_synced, self.cursor.advance())
        metrics.entries_synced.set(self._num_synced)

    def _report_failure(self, observer: SyncObserver, error: LedgerMirrorError) -> None:
        metrics.entry_failures.labels(kind=type(error).__name__).inc()
        observer(error, SyncUpdate(num_synced=self._num_synced, total=self._total))

    async def _read_total(self) -> int:
        try:
            return await self.ledger.entry_count()
        except LedgerUnreachable:
            raise
        except Exception as exc:
            raise LedgerUnreachable("entry_count", str(exc) or type(exc).__name__) from exc

    async def _read_range(self, count: int, offset: int) -> list[LedgerEntry]:
        try:
            entries = await self.ledger.get_range(count, offset)
        except LedgerUnreachable:
            raise
        except Exception as exc:
            raise LedgerUnreachable("get_range", str(exc) or type(exc).__name__) from exc

        # Never attempt more entries than requested: the cursor must not pass total.
        return list(entries)[:count]

    def _transition_to(self, new_phase: SyncPhase) -> None:
        """
        Move to a new run phase.

        Raises:
            ValueError: If the transition is not allowed.
        """
        if not self._phase.can_transition_to(new_phase):
            raise ValueError(f"Invalid state transition: {self._phase.name} -> {new_phase.name}")

        self._phase = new_phase
