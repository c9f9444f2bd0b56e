"""Tests for the Prometheus metrics registry."""

from __future__ import annotations

from unittest.mock import patch

from prometheus_client import generate_latest

from ledger_mirror.metrics import (
    REGISTRY,
    content_fetch_time,
    entries_synced,
    entry_failures,
    ledger_total,
    records_inserted,
    serve_metrics,
)


class TestMetricTypes:
    """Tests for metric type behavior."""

    def test_counter_increments_correctly(self) -> None:
        """Counter metrics increment by one on each call."""
        initial = records_inserted._value.get()
        records_inserted.inc()
        assert records_inserted._value.get() == initial + 1.0

    def test_labelled_counter(self) -> None:
        """Failure counts are tracked per error kind."""
        before = REGISTRY.get_sample_value(
            "ledger_mirror_entry_failures_total", {"kind": "ContentUnavailable"}
        )
        entry_failures.labels(kind="ContentUnavailable").inc()
        after = REGISTRY.get_sample_value(
            "ledger_mirror_entry_failures_total", {"kind": "ContentUnavailable"}
        )
        assert after == (before or 0) + 1

    def test_gauge_sets_value_correctly(self) -> None:
        """Gauge metrics can be set to arbitrary values."""
        entries_synced.set(150)
        ledger_total.set(320)
        assert entries_synced._value.get() == 150
        assert ledger_total._value.get() == 320

    def test_histogram_observes_values(self) -> None:
        """Histogram metrics record observations."""
        initial_samples = list(content_fetch_time.collect())[0].samples
        initial_count = next(s.value for s in initial_samples if s.name.endswith("_count"))

        content_fetch_time.observe(0.05)

        new_samples = list(content_fetch_time.collect())[0].samples
        new_count = next(s.value for s in new_samples if s.name.endswith("_count"))
        assert new_count == initial_count + 1


class TestExposition:
    """Tests for the text exposition of the dedicated registry."""

    def test_returns_prometheus_text(self) -> None:
        """Output is in Prometheus text format."""
        output = generate_latest(REGISTRY)

        assert b"# HELP ledger_mirror_entries_synced" in output
        assert b"# TYPE ledger_mirror_content_fetch_seconds histogram" in output

    def test_excludes_process_metrics(self) -> None:
        """The dedicated registry carries no default collectors."""
        output = generate_latest(REGISTRY)

        assert b"process_cpu_seconds_total" not in output
        assert b"python_gc_objects_collected_total" not in output

    def test_serve_metrics_uses_registry(self) -> None:
        """The HTTP endpoint exposes the dedicated registry on localhost."""
        with patch("ledger_mirror.metrics.registry.start_http_server") as server:
            serve_metrics(9100)

        server.assert_called_once_with(9100, addr="127.0.0.1", registry=REGISTRY)
