"""Incident analysis of a cycle snapshot.

Turns a CycleSnapshot into an Analysis: CRIT reports become critical
issues with a domain-specific severity, WARN reports become advisory
warnings, and the overall status picks the general recommendations and the
next check-in delay (CRIT 5 min, WARN 15 min, OK 30 min).

The analyzer never raises. An internal failure yields a degraded result
(overall WARN, one synthetic "Analysis Engine" issue, 5-minute check-in)
which is the system's only self-diagnostic signal.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sre_monitor.pipeline.types import (
    Analysis,
    AnalysisResult,
    CycleSnapshot,
    Issue,
    IssueSeverity,
    MetricDomain,
    MetricReport,
    MetricStatus,
)
from sre_monitor.telemetry import (
    ANALYSIS_COMPLETED,
    ANALYSIS_FAILED,
    ANALYSIS_STATUS_MISMATCH,
    get_logger,
)

log = get_logger(__name__)


@dataclass(frozen=True)
class _DomainRule:
    severity: IssueSeverity
    crit_description: str
    crit_recommendation: str
    warn_description: str
    warn_recommendation: str


# Issue order follows this mapping's order.
DOMAIN_RULES: dict[MetricDomain, _DomainRule] = {
    MetricDomain.DISK: _DomainRule(
        severity=IssueSeverity.CRITICAL,
        crit_description="Critical disk usage: {value}%",
        crit_recommendation="Immediate action required: Clean up disk space or expand storage",
        warn_description="High disk usage: {value}%",
        warn_recommendation="Monitor closely and plan for storage cleanup",
    ),
    MetricDomain.MEMORY: _DomainRule(
        severity=IssueSeverity.CRITICAL,
        crit_description="Critical memory usage: {value}%",
        crit_recommendation="Immediate action: Restart services or add more RAM",
        warn_description="High memory usage: {value}%",
        warn_recommendation="Investigate memory leaks and optimize applications",
    ),
    MetricDomain.LATENCY: _DomainRule(
        severity=IssueSeverity.HIGH,
        crit_description="Critical latency: {value}ms average",
        crit_recommendation="Check network infrastructure and server performance",
        warn_description="High latency: {value}ms average",
        warn_recommendation="Monitor network performance and optimize routing",
    ),
    MetricDomain.CPU: _DomainRule(
        severity=IssueSeverity.HIGH,
        crit_description="Critical CPU usage: {value}%",
        crit_recommendation="Investigate high-CPU processes and consider scaling",
        warn_description="High CPU usage: {value}%",
        warn_recommendation="Monitor CPU trends and optimize resource usage",
    ),
    MetricDomain.NETWORK: _DomainRule(
        severity=IssueSeverity.HIGH,
        crit_description="Network errors detected: {value}",
        crit_recommendation="Check network interfaces and resolve connectivity issues",
        warn_description="Network warnings detected",
        warn_recommendation="Monitor network performance and check for packet loss",
    ),
    MetricDomain.PROCESSES: _DomainRule(
        severity=IssueSeverity.MEDIUM,
        crit_description="Critical process count: {value}",
        crit_recommendation="Investigate process proliferation and clean up zombies",
        warn_description="High process count: {value}",
        warn_recommendation="Monitor process trends and optimize resource usage",
    ),
}

GENERAL_RECOMMENDATIONS: dict[MetricStatus, tuple[str, ...]] = {
    MetricStatus.OK: (
        "System is healthy, continue monitoring",
        "Schedule regular maintenance windows",
    ),
    MetricStatus.WARN: (
        "Address warnings before they become critical",
        "Increase monitoring frequency",
    ),
    MetricStatus.CRIT: (
        "Immediate attention required for critical issues",
        "Consider emergency maintenance window",
        "Notify on-call engineers",
    ),
}

CHECK_IN_DELAYS: dict[MetricStatus, timedelta] = {
    MetricStatus.CRIT: timedelta(minutes=5),
    MetricStatus.WARN: timedelta(minutes=15),
    MetricStatus.OK: timedelta(minutes=30),
}

DEGRADED_CHECK_IN_DELAY = timedelta(minutes=5)

# Counters are rendered as plain integers, percentages with up to two decimals
_COUNT_DOMAINS = frozenset({MetricDomain.NETWORK, MetricDomain.PROCESSES})


def check_in_delay(status: MetricStatus) -> timedelta:
    """Delay until the next check for an overall status."""
    return CHECK_IN_DELAYS[status]


def _format_value(report: MetricReport) -> str:
    if report.value is None:
        return "unknown"
    if report.domain is MetricDomain.LATENCY:
        return str(round(report.value))
    if report.domain in _COUNT_DOMAINS:
        return str(int(report.value))
    return f"{report.value:.2f}".rstrip("0").rstrip(".")


class MetricsAnalyzer:
    """Derives an Analysis from a CycleSnapshot.

    Rules are applied per domain independently, so re-running the analyzer
    on the same snapshot with the same ``now`` yields an identical result.
    """

    def __init__(self, rules: dict[MetricDomain, _DomainRule] | None = None) -> None:
        self.rules = rules or DOMAIN_RULES

    def analyze(self, snapshot: CycleSnapshot, now: datetime | None = None) -> AnalysisResult:
        """Analyze a snapshot.

        Args:
            snapshot: Snapshot of one cycle.
            now: Reference time for the next check-in (defaults to now, UTC).

        Returns:
            AnalysisResult; ``degraded`` is True if analysis itself failed.
        """
        now = now or datetime.now(timezone.utc)
        try:
            analysis = self._analyze(snapshot, now)
        except Exception as e:
            log.error(
                ANALYSIS_FAILED,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return degraded_result(now, f"{type(e).__name__}: {e}")

        if analysis.overall_status is not snapshot.overall_status:
            log.warning(
                ANALYSIS_STATUS_MISMATCH,
                analysis_status=analysis.overall_status.value,
                snapshot_status=snapshot.overall_status.value,
            )

        log.info(
            ANALYSIS_COMPLETED,
            overall_status=analysis.overall_status.value,
            critical_issues=len(analysis.critical_issues),
            warnings=len(analysis.warnings),
            recommendations=len(analysis.recommendations),
            next_check_in=analysis.next_check_in.isoformat(),
        )
        return AnalysisResult(analysis=analysis)

    def _analyze(self, snapshot: CycleSnapshot, now: datetime) -> Analysis:
        critical_issues: list[Issue] = []
        warnings: list[Issue] = []

        for domain, rule in self.rules.items():
            report = snapshot.report(domain)
            value = _format_value(report)
            if report.status is MetricStatus.CRIT:
                critical_issues.append(
                    Issue(
                        severity=rule.severity,
                        component=domain.component,
                        description=rule.crit_description.format(value=value),
                        recommendation=rule.crit_recommendation,
                    )
                )
            elif report.status is MetricStatus.WARN:
                warnings.append(
                    Issue(
                        component=domain.component,
                        description=rule.warn_description.format(value=value),
                        recommendation=rule.warn_recommendation,
                    )
                )

        if critical_issues:
            overall = MetricStatus.CRIT
        elif warnings:
            overall = MetricStatus.WARN
        else:
            overall = MetricStatus.OK

        return Analysis(
            overall_status=overall,
            critical_issues=tuple(critical_issues),
            warnings=tuple(warnings),
            recommendations=GENERAL_RECOMMENDATIONS[overall],
            next_check_in=now + check_in_delay(overall),
        )


def degraded_result(now: datetime, error: str) -> AnalysisResult:
    """Fail-soft analysis returned when the analyzer itself breaks."""
    analysis = Analysis(
        overall_status=MetricStatus.WARN,
        critical_issues=(
            Issue(
                severity=IssueSeverity.HIGH,
                component="Analysis Engine",
                description="Failed to analyze metrics",
                recommendation="Check analysis step implementation and logs",
            ),
        ),
        warnings=(),
        recommendations=("Review analysis step logs", "Verify data format"),
        next_check_in=now + DEGRADED_CHECK_IN_DELAY,
    )
    return AnalysisResult(analysis=analysis, degraded=True, error=error)
