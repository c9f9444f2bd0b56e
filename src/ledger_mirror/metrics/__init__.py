"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking synchronization.
Exposes metrics in Prometheus text format over HTTP.
"""

from .registry import (
    REGISTRY,
    content_fetch_time,
    entries_synced,
    entry_failures,
    ledger_total,
    records_inserted,
    serve_metrics,
)

__all__ = [
    "REGISTRY",
    "content_fetch_time",
    "entries_synced",
    "entry_failures",
    "ledger_total",
    "records_inserted",
    "serve_metrics",
]
