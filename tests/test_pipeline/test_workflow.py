"""Tests for the end-to-end monitoring cycle."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from sre_monitor.pipeline.analyzer import MetricsAnalyzer
from sre_monitor.pipeline.notifier import Notifier
from sre_monitor.pipeline.types import (
    CycleOutcome,
    MetricDomain,
    MetricStatus,
    NotificationResult,
)
from sre_monitor.pipeline.workflow import MonitoringPipeline


def _collector(snapshot) -> MagicMock:
    collector = MagicMock()
    collector.collect = AsyncMock(return_value=snapshot)
    return collector


def _failing_notifier() -> MagicMock:
    notifier = MagicMock(spec=Notifier)
    notifier.send = AsyncMock(
        return_value=NotificationResult(
            sent=False,
            channel="unknown",
            message="Failed to send notification",
            timestamp=datetime.now(timezone.utc),
            error="connection refused",
        )
    )
    return notifier


@pytest.mark.asyncio
class TestMonitoringPipeline:
    """Test MonitoringPipeline.run_cycle()."""

    @pytest.mark.parametrize(
        "statuses,outcome",
        [
            ({}, CycleOutcome.SUCCESS),
            ({MetricDomain.CPU: MetricStatus.WARN}, CycleOutcome.PARTIAL),
            ({MetricDomain.DISK: MetricStatus.CRIT}, CycleOutcome.FAILED),
        ],
    )
    async def test_outcome_follows_status(self, make_snapshot, statuses, outcome) -> None:
        """Test OK/WARN/CRIT map to SUCCESS/PARTIAL/FAILED."""
        snapshot = make_snapshot(statuses)
        pipeline = MonitoringPipeline(
            collector=_collector(snapshot),
            analyzer=MetricsAnalyzer(),
            notifier=Notifier(),
            notifications_enabled=True,
        )

        result = await pipeline.run_cycle()

        assert result.outcome is outcome
        assert result.snapshot is snapshot
        assert result.summary == (
            f"System monitoring completed with status: {snapshot.overall_status.value}"
        )
        assert result.next_execution == result.analysis.next_check_in
        assert result.notification is not None and result.notification.sent is True

    async def test_notifier_failure_does_not_change_schedule(self, make_snapshot) -> None:
        """Test a failed notification is recorded without affecting next execution."""
        snapshot = make_snapshot({MetricDomain.DISK: MetricStatus.CRIT})
        pipeline = MonitoringPipeline(
            collector=_collector(snapshot),
            notifier=_failing_notifier(),
            notifications_enabled=True,
        )

        result = await pipeline.run_cycle()

        assert result.notification.sent is False
        assert result.analysis.overall_status is MetricStatus.CRIT
        assert result.next_execution == result.analysis.next_check_in

    async def test_notifications_disabled(self, make_snapshot) -> None:
        """Test the notifier is skipped when notifications are disabled."""
        notifier = _failing_notifier()
        pipeline = MonitoringPipeline(
            collector=_collector(make_snapshot()),
            notifier=notifier,
            notifications_enabled=False,
        )

        result = await pipeline.run_cycle()

        assert result.notification is None
        notifier.send.assert_not_awaited()

    async def test_degraded_analysis_propagates(self, make_snapshot) -> None:
        """Test a degraded analysis still completes the cycle with a 5 minute check-in."""
        analyzer = MetricsAnalyzer()
        analyzer._analyze = MagicMock(side_effect=RuntimeError("boom"))
        pipeline = MonitoringPipeline(
            collector=_collector(make_snapshot()),
            analyzer=analyzer,
            notifier=Notifier(),
            notifications_enabled=False,
        )

        result = await pipeline.run_cycle()

        assert result.result.degraded is True
        assert result.outcome is CycleOutcome.PARTIAL
        delta = result.next_execution - datetime.now(timezone.utc)
        assert 0 < delta.total_seconds() <= 300
