"""Sensor package: raw metric providers and the latency sampler.

Structure:
- types.py: raw sample records
- statistics.py: distribution summaries (nearest-rank percentiles)
- latency.py: sequential HTTP HEAD latency probe (httpx)
- host.py: disk/memory/cpu/network/process providers (psutil)
"""

from sre_monitor.sensors.host import HostMetricsProvider, MetricsProvider
from sre_monitor.sensors.latency import LatencyProbeConfig, LatencySampler, ProbeHTTPError
from sre_monitor.sensors.statistics import SampleStatistics, percentile, summarize

__all__ = [
    "HostMetricsProvider",
    "MetricsProvider",
    "LatencyProbeConfig",
    "LatencySampler",
    "ProbeHTTPError",
    "SampleStatistics",
    "percentile",
    "summarize",
]
