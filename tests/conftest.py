"""Shared fixtures for the sre_monitor test suite."""

import os
import tempfile
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone

import pytest

# Keep test logs out of the project tree; must run before sre_monitor is imported.
os.environ.setdefault("MONITOR_LOG_DIR", tempfile.mkdtemp(prefix="sre-monitor-logs-"))

from sre_monitor.pipeline.aggregator import aggregate  # noqa: E402
from sre_monitor.pipeline.analyzer import MetricsAnalyzer  # noqa: E402
from sre_monitor.pipeline.types import (  # noqa: E402
    CycleOutcome,
    CycleResult,
    CycleSnapshot,
    MetricDomain,
    MetricReport,
    MetricStatus,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

_DEFAULT_VALUES = {
    MetricStatus.OK: 10.0,
    MetricStatus.WARN: 85.0,
    MetricStatus.CRIT: 95.0,
}

SnapshotFactory = Callable[..., CycleSnapshot]


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for analyses."""
    return FIXED_NOW


@pytest.fixture
def make_snapshot() -> SnapshotFactory:
    """Build a snapshot from per-domain statuses; unspecified domains are OK."""

    def _make(
        statuses: Mapping[MetricDomain, MetricStatus] | None = None,
        values: Mapping[MetricDomain, float] | None = None,
    ) -> CycleSnapshot:
        statuses = statuses or {}
        values = values or {}
        reports = {}
        for domain in MetricDomain:
            status = statuses.get(domain, MetricStatus.OK)
            value = values.get(domain, _DEFAULT_VALUES.get(status))
            reports[domain] = MetricReport(domain=domain, status=status, value=value)
        return aggregate(reports, timestamp=FIXED_NOW)

    return _make


@pytest.fixture
def make_cycle_result(make_snapshot: SnapshotFactory) -> Callable[..., CycleResult]:
    """Build a CycleResult whose next execution is ``delay`` after now."""

    def _make(
        statuses: Mapping[MetricDomain, MetricStatus] | None = None,
        delay: timedelta = timedelta(hours=1),
    ) -> CycleResult:
        snapshot = make_snapshot(statuses)
        now = datetime.now(timezone.utc)
        result = MetricsAnalyzer().analyze(snapshot, now=now)
        next_execution = now + delay
        return CycleResult(
            snapshot=snapshot,
            result=result,
            outcome=CycleOutcome.SUCCESS,
            summary=f"System monitoring completed with status: {snapshot.overall_status.value}",
            next_execution=next_execution,
        )

    return _make
