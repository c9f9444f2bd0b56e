"""
Exception hierarchy for ledger synchronization.

Errors fall into two groups:

- **Per-entry errors** (`SyncError` subclasses) describe a single ledger entry
  that could not be mirrored. The sync loop catches them at the entry boundary
  and reports them to the observer. The run keeps going.
- **Run-level errors** abort the run and surface to its caller. A ledger that
  cannot be paged is the only such condition during sync.

`MalformedIdentifier` is raised by the address codec. It signals corrupted data
or a programming bug and is meant to be loud.
"""

from __future__ import annotations


class LedgerMirrorError(Exception):
    """
    Base exception for all ledger mirror errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class MalformedIdentifier(LedgerMirrorError):
    """
    Raised when a content identifier violates the fixed-width or prefix rules.

    Attributes:
        value: The offending identifier (truncated for display).
        detail: What was wrong with it.
    """

    def __init__(self, value: object, detail: str) -> None:
        self.value = value
        self.detail = detail

        value_repr = repr(value)
        if len(value_repr) > 80:
            value_repr = value_repr[:77] + "..."

        super().__init__(f"Malformed content identifier {value_repr}: {detail}")


class LedgerUnreachable(LedgerMirrorError):
    """
    Raised when the ledger count or page request fails.

    Fatal to the current run. Callers decide whether to restart.

    Attributes:
        operation: The ledger call that failed (e.g. "entry_count").
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Ledger unreachable during {operation}: {detail}")


class SyncError(LedgerMirrorError):
    """
    Base class for per-entry failures.

    Attributes:
        content_id: Content store identifier of the failing entry.
    """

    def __init__(self, content_id: str, message: str) -> None:
        self.content_id = content_id
        super().__init__(message)


class ContentUnavailable(SyncError):
    """
    Raised when a payload cannot be retrieved from the content store.

    Covers not-found responses, network failures and fetch timeouts.

    Attributes:
        timed_out: True if the fetch lost the race against its timer.
    """

    def __init__(self, content_id: str, detail: str, *, timed_out: bool = False) -> None:
        self.detail = detail
        self.timed_out = timed_out
        super().__init__(content_id, f"Error fetching metafile {content_id}: {detail}")


class DecodeError(SyncError):
    """
    Raised when a payload does not match the metadata schema.

    Attributes:
        detail: Description of what went wrong.
        offset: Byte offset where decoding failed (if known).
    """

    def __init__(self, content_id: str, detail: str, *, offset: int | None = None) -> None:
        self.detail = detail
        self.offset = offset

        msg = f"Failed to decode metafile {content_id}: {detail}"
        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"

        super().__init__(content_id, msg)


class DuplicateKey(SyncError):
    """
    Raised when inserting a record whose id is already cached.

    Under the at-most-once sync policy this points at a resumability bug.
    """

    def __init__(self, content_id: str) -> None:
        super().__init__(content_id, f"Record already cached: {content_id}")


class StoreError(SyncError):
    """
    Raised when the local cache rejects a record for a reason other than a
    duplicate id.

    Attributes:
        detail: The underlying storage failure.
    """

    def __init__(self, content_id: str, detail: str) -> None:
        self.detail = detail
        super().__init__(content_id, f"Failed to cache metafile {content_id}: {detail}")


class SyncInProgress(LedgerMirrorError):
    """
    Raised when a second run is started against a namespace already syncing.

    Only guards runs within one process.

    Attributes:
        namespace: The sync namespace that is busy.
    """

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        super().__init__(f"A sync run for {namespace} is already in progress")
