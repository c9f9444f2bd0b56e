"""
Timeout-bounded retrieval of payloads from the content store.

A content store fetch can hang indefinitely when nobody serves the requested
content. The fetcher races every retrieval against a timer so a single
unreachable item never stalls the sync loop:

- Retrieval wins: the payload is returned.
- Timer wins: ``None`` is returned and the retrieval is cancelled. A payload
  that would have arrived later is discarded.
- Retrieval fails: the failure surfaces as `ContentUnavailable`.

No retry happens here. The caller decides what a skipped entry means.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ledger_mirror import metrics
from ledger_mirror.errors import ContentUnavailable

logger = logging.getLogger(__name__)


class ContentStore(Protocol):
    """
    Protocol for a content-addressed blob store.

    Implementations may block for a long time on `cat`. They should raise on
    not-found or network errors rather than return empty bytes.
    """

    async def cat(self, content_id: str) -> bytes:
        """
        Retrieve the bytes addressed by a multihash identifier.

        Args:
            content_id: Base58 multihash string.
        """
        ...

    async def add(self, data: bytes) -> str:
        """
        Store bytes and return their multihash identifier.

        Args:
            data: Bytes to publish.
        """
        ...


class ContentFetcher:
    """Fetches payloads with a bounded wait."""

    def __init__(self, store: ContentStore) -> None:
        self.store = store

    async def fetch(self, content_id: str, timeout: float) -> bytes | None:
        """
        Fetch a payload, giving up after ``timeout`` seconds.

        Args:
            content_id: Base58 multihash string.
            timeout: Maximum wait in seconds.

        Returns:
            The payload, or None if the timer fired first.

        Raises:
            ContentUnavailable: If the content store reported a failure.
        """
        with metrics.content_fetch_time.time():
            try:
                return await asyncio.wait_for(self.store.cat(content_id), timeout)
            except TimeoutError:
                logger.debug("Fetch of %s timed out after %.2fs", content_id, timeout)
                return None
            except ContentUnavailable:
                raise
            except Exception as exc:
                raise ContentUnavailable(content_id, str(exc) or type(exc).__name__) from exc
