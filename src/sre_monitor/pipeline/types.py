"""Core types for the monitoring pipeline.

This module defines the records passed between pipeline stages:
- MetricStatus / MetricDomain / IssueSeverity: enumerations
- Threshold, LatencyThresholds, ThresholdConfig: classifier configuration
- MetricReport: per-metric classification
- CycleSnapshot: all reports of one collection cycle
- Issue, Analysis, AnalysisResult: analyzer output
- NotificationIntent, NotificationResult: notifier input/output
- CycleResult: outcome of one complete cycle

All records are frozen; each belongs to exactly one cycle.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MetricStatus(str, Enum):
    """Three-level metric status plus UNKNOWN for missing data."""

    OK = "OK"
    WARN = "WARN"
    CRIT = "CRIT"
    UNKNOWN = "UNKNOWN"

    @property
    def rank(self) -> int | None:
        """Severity rank (OK=0 < WARN=1 < CRIT=2); None for UNKNOWN."""
        return _STATUS_RANK.get(self)


_STATUS_RANK = {MetricStatus.OK: 0, MetricStatus.WARN: 1, MetricStatus.CRIT: 2}


def worst_status(statuses: "list[MetricStatus] | tuple[MetricStatus, ...]") -> MetricStatus:
    """Return the most severe known status; UNKNOWN is ignored.

    An input with no known status yields OK.
    """
    known = [s for s in statuses if s.rank is not None]
    if not known:
        return MetricStatus.OK
    return max(known, key=lambda s: _STATUS_RANK[s])


class MetricDomain(str, Enum):
    """Monitored metric categories."""

    DISK = "disk"
    MEMORY = "memory"
    CPU = "cpu"
    NETWORK = "network"
    PROCESSES = "processes"
    LATENCY = "latency"

    @property
    def component(self) -> str:
        """Human-facing component name used in issues."""
        return _COMPONENT_NAMES[self]


_COMPONENT_NAMES = {
    MetricDomain.DISK: "Disk",
    MetricDomain.MEMORY: "Memory",
    MetricDomain.CPU: "CPU",
    MetricDomain.NETWORK: "Network",
    MetricDomain.PROCESSES: "Processes",
    MetricDomain.LATENCY: "Network Latency",
}


class IssueSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Threshold(_Frozen):
    """WARN/CRIT pair; comparisons are inclusive (value >= threshold)."""

    warn: float = Field(..., ge=0)
    crit: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_order(self) -> "Threshold":
        if self.warn > self.crit:
            raise ValueError(f"warn threshold ({self.warn}) must not exceed crit ({self.crit})")
        return self


class LatencyThresholds(_Frozen):
    """Independent thresholds for average and p95 latency (ms)."""

    avg: Threshold = Threshold(warn=1000, crit=5000)
    p95: Threshold = Threshold(warn=5000, crit=10000)


class ThresholdConfig(_Frozen):
    """Classifier thresholds for every metric domain."""

    disk: Threshold = Threshold(warn=80, crit=90)
    memory: Threshold = Threshold(warn=85, crit=95)
    cpu: Threshold = Threshold(warn=80, crit=95)
    processes: Threshold = Threshold(warn=200, crit=500)
    network: Threshold = Threshold(warn=10, crit=100)
    latency: LatencyThresholds = LatencyThresholds()


class MetricReport(_Frozen):
    """Classification of one metric domain for one cycle."""

    domain: MetricDomain
    status: MetricStatus
    value: float | None = Field(None, description="Primary measured value compared to thresholds")
    details: dict[str, Any] = Field(default_factory=dict, description="Domain-specific values")
    raw_sample: tuple[float, ...] | None = Field(
        None, description="Raw measurements, when the metric is sample-based"
    )


class CycleSnapshot(_Frozen):
    """One report per domain plus the worst-of-all status.

    ``overall_status`` ignores UNKNOWN reports; those are listed in
    ``unknown_domains`` instead.
    """

    timestamp: datetime
    reports: dict[MetricDomain, MetricReport]
    overall_status: MetricStatus

    def report(self, domain: MetricDomain) -> MetricReport:
        return self.reports[domain]

    @property
    def unknown_domains(self) -> list[MetricDomain]:
        return [d for d, r in self.reports.items() if r.status is MetricStatus.UNKNOWN]


class Issue(_Frozen):
    """A finding derived from a CRIT (severity set) or WARN (severity None) report."""

    severity: IssueSeverity | None = None
    component: str
    description: str
    recommendation: str


class Analysis(_Frozen):
    overall_status: MetricStatus
    critical_issues: tuple[Issue, ...] = ()
    warnings: tuple[Issue, ...] = ()
    recommendations: tuple[str, ...] = ()
    next_check_in: datetime


class AnalysisResult(_Frozen):
    """Analyzer outcome: a normal or a degraded analysis of identical shape."""

    analysis: Analysis
    degraded: bool = False
    error: str | None = None


class NotificationIntent(_Frozen):
    channel: str
    severity_band: MetricStatus
    message: str
    recipients: tuple[str, ...]


class NotificationResult(_Frozen):
    sent: bool
    channel: str
    message: str
    timestamp: datetime
    recipients: tuple[str, ...] = ()
    error: str | None = None


class CycleOutcome(str, Enum):
    """Cycle-level result derived from the overall status."""

    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


class CycleResult(_Frozen):
    """Everything one monitoring cycle produced."""

    snapshot: CycleSnapshot
    result: AnalysisResult
    notification: NotificationResult | None = None
    outcome: CycleOutcome
    summary: str
    next_execution: datetime

    @property
    def analysis(self) -> Analysis:
        return self.result.analysis
