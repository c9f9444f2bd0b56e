"""
Sync service configuration constants.

Operational parameters for synchronization: chunk size, timeouts, and delays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

CHUNK_SIZE: Final[int] = 100
"""Maximum ledger entries requested per page."""

FETCH_TIMEOUT: Final[float] = 2.0
"""Seconds to wait for a content store payload before skipping the entry."""

POLL_INTERVAL: Final[float] = 0.25
"""Seconds to wait between polling passes."""


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Per-service overrides for the sync parameters."""

    chunk_size: int = CHUNK_SIZE
    """Maximum ledger entries requested per page."""

    fetch_timeout: float = FETCH_TIMEOUT
    """Seconds to wait for each payload."""

    poll_interval: float = POLL_INTERVAL
    """Seconds between polling passes."""

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must be non-negative, got {self.poll_interval}")
