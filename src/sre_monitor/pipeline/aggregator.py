"""Concurrent metric collection and cycle aggregation.

The six domain probes run as independent tasks and are joined before
aggregation (fan-out/fan-in). Each probe is bounded by its own timeout and
degrades to an UNKNOWN report on failure, so one slow or broken probe never
blocks the others or aborts the cycle. Nothing is retried within a cycle.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, TypeVar

from sre_monitor.pipeline.classifier import (
    classify_cpu,
    classify_disk,
    classify_latency,
    classify_memory,
    classify_network,
    classify_processes,
    unknown_report,
)
from sre_monitor.pipeline.types import (
    CycleSnapshot,
    MetricDomain,
    MetricReport,
    ThresholdConfig,
    worst_status,
)
from sre_monitor.sensors.host import HostMetricsProvider, MetricsProvider
from sre_monitor.sensors.latency import LatencyProbeConfig, LatencySampler
from sre_monitor.telemetry import (
    METRICS_COLLECTION_COMPLETED,
    METRICS_COLLECTION_STARTED,
    SENSOR_POLL_FAILED,
    get_logger,
)

if TYPE_CHECKING:
    from sre_monitor.config.settings import AppConfig

log = get_logger(__name__)

T = TypeVar("T")

# Headroom on top of the latency probe's own worst-case duration
LATENCY_SLACK_SECONDS = 5.0


def aggregate(
    reports: Mapping[MetricDomain, MetricReport], timestamp: datetime | None = None
) -> CycleSnapshot:
    """Combine per-domain reports into a CycleSnapshot.

    Domains missing from ``reports`` are filled with UNKNOWN. The overall
    status is the worst known status; UNKNOWN never raises it, and an
    all-UNKNOWN cycle is OK.

    Args:
        reports: Reports keyed by domain, all from the same cycle.
        timestamp: Cycle timestamp (defaults to now, UTC).

    Returns:
        Immutable CycleSnapshot.
    """
    complete = {
        domain: reports.get(domain) or unknown_report(domain, "not collected")
        for domain in MetricDomain
    }
    return CycleSnapshot(
        timestamp=timestamp or datetime.now(timezone.utc),
        reports=complete,
        overall_status=worst_status([r.status for r in complete.values()]),
    )


class MetricsCollector:
    """Collects one MetricReport per domain concurrently.

    Args:
        provider: Host metrics source (disk, memory, cpu, network, processes).
        sampler: Latency sampler.
        latency_config: Latency probe parameters.
        thresholds: Classifier thresholds.
        probe_timeout_seconds: Bound for each host probe.
    """

    def __init__(
        self,
        latency_config: LatencyProbeConfig,
        provider: MetricsProvider | None = None,
        sampler: LatencySampler | None = None,
        thresholds: ThresholdConfig | None = None,
        probe_timeout_seconds: float = 15.0,
    ) -> None:
        self.latency_config = latency_config
        self.provider = provider or HostMetricsProvider()
        self.sampler = sampler or LatencySampler()
        self.thresholds = thresholds or ThresholdConfig()
        self.probe_timeout_seconds = probe_timeout_seconds

    @classmethod
    def from_settings(
        cls,
        config: "AppConfig",
        provider: MetricsProvider | None = None,
        sampler: LatencySampler | None = None,
    ) -> "MetricsCollector":
        """Build a collector from application configuration."""
        return cls(
            latency_config=LatencyProbeConfig(
                url=config.latency_target_url,
                attempts=config.latency_attempts,
                timeout_ms=config.latency_timeout_ms,
                pause_ms=config.latency_pause_ms,
            ),
            provider=provider,
            sampler=sampler,
            thresholds=config.threshold_config(),
            probe_timeout_seconds=config.probe_timeout_seconds,
        )

    async def collect(self) -> CycleSnapshot:
        """Run all six probes concurrently and aggregate the results.

        Returns:
            CycleSnapshot for this cycle. Never raises for probe failures.
        """
        log.info(METRICS_COLLECTION_STARTED, target_url=str(self.latency_config.url))
        timestamp = datetime.now(timezone.utc)

        th = self.thresholds
        p = self.provider
        probes: dict[MetricDomain, Callable[[], Awaitable[MetricReport]]] = {
            MetricDomain.DISK: lambda: self._host_probe(p.disk, lambda s: classify_disk(s, th.disk)),
            MetricDomain.MEMORY: lambda: self._host_probe(
                p.memory, lambda s: classify_memory(s, th.memory)
            ),
            MetricDomain.CPU: lambda: self._host_probe(p.cpu, lambda s: classify_cpu(s, th.cpu)),
            MetricDomain.NETWORK: lambda: self._host_probe(
                p.network, lambda s: classify_network(s, th.network)
            ),
            MetricDomain.PROCESSES: lambda: self._host_probe(
                p.processes, lambda s: classify_processes(s, th.processes)
            ),
            MetricDomain.LATENCY: self._latency_probe,
        }

        results = await asyncio.gather(
            *(self._guarded(domain, probe) for domain, probe in probes.items())
        )
        snapshot = aggregate(dict(zip(probes, results)), timestamp)

        log.info(
            METRICS_COLLECTION_COMPLETED,
            overall_status=snapshot.overall_status.value,
            statuses={d.value: r.status.value for d, r in snapshot.reports.items()},
            unknown=[d.value for d in snapshot.unknown_domains],
        )
        return snapshot

    async def _host_probe(
        self, read: Callable[[], T], classify: Callable[[T], MetricReport]
    ) -> MetricReport:
        sample = await asyncio.wait_for(asyncio.to_thread(read), timeout=self.probe_timeout_seconds)
        return classify(sample)

    async def _latency_probe(self) -> MetricReport:
        bound = self.latency_config.max_duration_seconds + LATENCY_SLACK_SECONDS
        sample = await asyncio.wait_for(self.sampler.sample(self.latency_config), timeout=bound)
        return classify_latency(sample, self.thresholds.latency)

    async def _guarded(
        self, domain: MetricDomain, probe: Callable[[], Awaitable[MetricReport]]
    ) -> MetricReport:
        """Run one probe; any failure becomes an UNKNOWN report for that domain."""
        try:
            return await probe()
        except asyncio.TimeoutError:
            log.warning(SENSOR_POLL_FAILED, domain=domain.value, error="probe timed out")
            return unknown_report(domain, "probe timed out")
        except Exception as e:
            log.warning(
                SENSOR_POLL_FAILED,
                domain=domain.value,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return unknown_report(domain, str(e))
