"""Sync run state machine."""

from __future__ import annotations

from enum import Enum, auto


class SyncPhase(Enum):
    """
    Phases of a synchronization run.

    State Machine Diagram
    ---------------------
    ::

        IDLE --> FETCHING_TOTAL --> PAGING --> DONE
                   ^     |            |
                   |     +------------+--> POLLING
                   +---------------------------+

    A run reads the ledger size (FETCHING_TOTAL), pages through every entry
    past the cursor (PAGING), then either finishes (DONE) or waits and starts
    over (POLLING). When the cursor already covers the ledger, PAGING is
    skipped. Any phase may fall back to IDLE on cancellation or a fatal error.
    """

    IDLE = auto()
    """No run in progress."""

    FETCHING_TOTAL = auto()
    """Reading the current ledger entry count."""

    PAGING = auto()
    """Requesting chunks and mirroring their entries."""

    POLLING = auto()
    """Caught up; waiting before the next pass."""

    DONE = auto()
    """Caught up and not polling. Terminal for the run."""

    def can_transition_to(self, target: SyncPhase) -> bool:
        """
        Check if transition to target phase is valid.

        Args:
            target: The proposed target phase.

        Returns:
            True if the transition is allowed by the state machine rules.
        """
        return target in _VALID_TRANSITIONS.get(self, set())

    @property
    def is_active(self) -> bool:
        """Check if a run is in progress."""
        return self in {SyncPhase.FETCHING_TOTAL, SyncPhase.PAGING, SyncPhase.POLLING}


_VALID_TRANSITIONS: dict[SyncPhase, set[SyncPhase]] = {
    SyncPhase.IDLE: {SyncPhase.FETCHING_TOTAL},
    SyncPhase.FETCHING_TOTAL: {
        SyncPhase.PAGING,
        SyncPhase.POLLING,
        SyncPhase.DONE,
        SyncPhase.IDLE,
    },
    SyncPhase.PAGING: {SyncPhase.POLLING, SyncPhase.DONE, SyncPhase.IDLE},
    SyncPhase.POLLING: {SyncPhase.FETCHING_TOTAL, SyncPhase.IDLE},
    SyncPhase.DONE: {SyncPhase.FETCHING_TOTAL, SyncPhase.IDLE},
}
"""Valid phase transitions for the sync state machine."""
