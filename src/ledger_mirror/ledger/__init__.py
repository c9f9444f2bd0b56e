"""
Ledger access.

The ledger is an external collaborator: an append-only list of entries that the
sync engine pages through. This package defines the contract and ships an HTTP
client plus an in-memory implementation.
"""

from .http import HttpLedger
from .interface import LedgerEntry, LedgerReader, LedgerWriter
from .memory import InMemoryLedger

__all__ = [
    "HttpLedger",
    "InMemoryLedger",
    "LedgerEntry",
    "LedgerReader",
    "LedgerWriter",
]
