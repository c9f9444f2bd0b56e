"""Test helpers for ledger mirror unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from .builders import (
    CREATOR,
    NAMESPACE,
    content_id_for,
    make_chain_id,
    make_inode,
    make_metadata,
)
from .mocks import MockContentStore, MockLedger, RecordingObserver


async def wait_until(condition: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``condition`` holds or ``timeout`` elapses."""
    async with asyncio.timeout(timeout):
        while not condition():
            await asyncio.sleep(0.001)


__all__ = [
    "CREATOR",
    "NAMESPACE",
    "MockContentStore",
    "MockLedger",
    "RecordingObserver",
    "content_id_for",
    "make_chain_id",
    "make_inode",
    "make_metadata",
    "wait_until",
]
