"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the synchronization engine.
Exposes metrics in Prometheus text format via `serve_metrics`.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

# Dedicated registry, free of default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Sync Progress
# -----------------------------------------------------------------------------

entries_synced = Gauge(
    "ledger_mirror_entries_synced",
    "Ledger entries attempted so far (persisted cursor value)",
    registry=REGISTRY,
)

ledger_total = Gauge(
    "ledger_mirror_ledger_total",
    "Last observed ledger entry count",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Entry Processing
# -----------------------------------------------------------------------------

records_inserted = Counter(
    "ledger_mirror_records_inserted_total",
    "Records decoded and inserted into the local cache",
    registry=REGISTRY,
)

entry_failures = Counter(
    "ledger_mirror_entry_failures_total",
    "Ledger entries skipped because of a per-entry error",
    ["kind"],
    registry=REGISTRY,
)

content_fetch_time = Histogram(
    "ledger_mirror_content_fetch_seconds",
    "Content store fetch duration, including timeouts",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
    registry=REGISTRY,
)


def serve_metrics(port: int, addr: str = "127.0.0.1") -> None:
    """
    Expose the registry over HTTP in Prometheus text format.

    Serves from a daemon thread for the life of the process.

    Args:
        port: TCP port to listen on.
        addr: Interface to bind.
    """
    start_http_server(port, addr=addr, registry=REGISTRY)
