"""One monitoring cycle: collect -> analyze -> notify -> result.

The notifier is a terminal sink: its outcome is recorded on the result but
never changes the analysis or the next execution time.
"""

from datetime import datetime, timezone

from sre_monitor.config.settings import AppConfig, get_settings
from sre_monitor.pipeline.aggregator import MetricsCollector
from sre_monitor.pipeline.analyzer import MetricsAnalyzer
from sre_monitor.pipeline.notifier import Notifier
from sre_monitor.pipeline.types import CycleOutcome, CycleResult, MetricStatus
from sre_monitor.telemetry import (
    CYCLE_COMPLETED,
    CYCLE_STARTED,
    NOTIFICATION_SKIPPED,
    get_logger,
)

log = get_logger(__name__)

_OUTCOMES = {
    MetricStatus.OK: CycleOutcome.SUCCESS,
    MetricStatus.WARN: CycleOutcome.PARTIAL,
    MetricStatus.CRIT: CycleOutcome.FAILED,
}


class MonitoringPipeline:
    """Runs complete monitoring cycles.

    Usage:
        pipeline = MonitoringPipeline()
        result = await pipeline.run_cycle()
        print(result.analysis.overall_status)
    """

    def __init__(
        self,
        collector: MetricsCollector | None = None,
        analyzer: MetricsAnalyzer | None = None,
        notifier: Notifier | None = None,
        notifications_enabled: bool | None = None,
        config: AppConfig | None = None,
    ) -> None:
        if collector is None or notifier is None or notifications_enabled is None:
            config = config or get_settings()
        self.collector = collector or MetricsCollector.from_settings(config)
        self.analyzer = analyzer or MetricsAnalyzer()
        self.notifier = notifier or Notifier.from_settings(config)
        self.notifications_enabled = (
            notifications_enabled
            if notifications_enabled is not None
            else config.notifications_enabled
        )

    async def run_cycle(self) -> CycleResult:
        """Run one cycle end to end.

        Returns:
            CycleResult with snapshot, analysis, notification and next execution.
        """
        log.info(CYCLE_STARTED)

        snapshot = await self.collector.collect()
        result = self.analyzer.analyze(snapshot, now=datetime.now(timezone.utc))
        analysis = result.analysis

        notification = None
        if self.notifications_enabled:
            notification = await self.notifier.send(analysis)
        else:
            log.info(NOTIFICATION_SKIPPED, reason="notifications disabled")

        outcome = _OUTCOMES[analysis.overall_status]
        cycle = CycleResult(
            snapshot=snapshot,
            result=result,
            notification=notification,
            outcome=outcome,
            summary=f"System monitoring completed with status: {analysis.overall_status.value}",
            next_execution=analysis.next_check_in,
        )

        log.info(
            CYCLE_COMPLETED,
            outcome=outcome.value,
            overall_status=analysis.overall_status.value,
            degraded=result.degraded,
            notification_sent=notification.sent if notification else None,
            next_execution=cycle.next_execution.isoformat(),
        )
        return cycle
