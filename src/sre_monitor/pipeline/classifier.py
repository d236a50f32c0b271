"""Threshold classification of raw samples into MetricReports.

Every comparison is inclusive and CRIT-first: ``value >= crit`` is CRIT,
else ``value >= warn`` is WARN, else OK. Latency is the only compound rule:
it escalates when either the average or the p95 crosses a line.
"""

from sre_monitor.pipeline.types import (
    LatencyThresholds,
    MetricDomain,
    MetricReport,
    MetricStatus,
    Threshold,
    worst_status,
)
from sre_monitor.sensors.statistics import summarize
from sre_monitor.sensors.types import (
    CpuSample,
    DiskSample,
    LatencySample,
    MemorySample,
    NetworkSample,
    ProcessSample,
)
from sre_monitor.telemetry import METRIC_CLASSIFIED, get_logger

log = get_logger(__name__)

LOW_SPACE_FRACTION = 0.1


def classify_value(value: float, threshold: Threshold) -> MetricStatus:
    """Classify a single value against a WARN/CRIT pair."""
    if value >= threshold.crit:
        return MetricStatus.CRIT
    if value >= threshold.warn:
        return MetricStatus.WARN
    return MetricStatus.OK


def unknown_report(domain: MetricDomain, reason: str | None = None) -> MetricReport:
    """Report for a domain whose data could not be collected."""
    details = {"error": reason} if reason else {}
    return MetricReport(domain=domain, status=MetricStatus.UNKNOWN, details=details)


def _logged(report: MetricReport) -> MetricReport:
    log.debug(
        METRIC_CLASSIFIED,
        domain=report.domain.value,
        status=report.status.value,
        value=report.value,
    )
    return report


def classify_disk(sample: DiskSample, threshold: Threshold) -> MetricReport:
    """Classify every mount independently; the metric takes the worst mount.

    The worst mount is the one with the highest usage, so the metric status
    equals ``classify_value(highest, threshold)``.
    """
    if not sample.mounts:
        return unknown_report(MetricDomain.DISK, "no mounts reported")

    mounts = []
    for mount in sample.mounts:
        mounts.append({**mount.model_dump(), "status": classify_value(mount.use, threshold).value})

    highest = max(m.use for m in sample.mounts)
    status = classify_value(highest, threshold)

    total_size = sum(m.size for m in sample.mounts)
    total_used = sum(m.used for m in sample.mounts)
    total_available = total_size - total_used
    critical_mounts = [m["mount"] for m in mounts if m["status"] == MetricStatus.CRIT.value]

    recommendations = []
    if critical_mounts:
        recommendations.append(f"Critical disk usage on: {', '.join(critical_mounts)}")
    if any(m["status"] == MetricStatus.WARN.value for m in mounts):
        recommendations.append("Some mounts are approaching critical usage")
    if total_available < total_size * LOW_SPACE_FRACTION:
        recommendations.append("Total available space is less than 10% of total capacity")

    return _logged(
        MetricReport(
            domain=MetricDomain.DISK,
            status=status,
            value=highest,
            details={
                "highest": highest,
                "mounts": mounts,
                "total_size": total_size,
                "total_used": total_used,
                "total_available": total_available,
                "critical_mounts": critical_mounts,
                "has_low_space": bool(critical_mounts),
                "recommendations": recommendations,
            },
        )
    )


def classify_memory(sample: MemorySample, threshold: Threshold) -> MetricReport:
    usage = sample.usage_percent
    return _logged(
        MetricReport(
            domain=MetricDomain.MEMORY,
            status=classify_value(usage, threshold),
            value=usage,
            details={
                "usage_percent": round(usage, 2),
                "total": sample.total,
                "used": sample.used,
                "available": sample.available,
                "swap_usage_percent": round(sample.swap_usage_percent, 2),
            },
        )
    )


def classify_cpu(sample: CpuSample, threshold: Threshold) -> MetricReport:
    usage = sample.usage_percent
    return _logged(
        MetricReport(
            domain=MetricDomain.CPU,
            status=classify_value(usage, threshold),
            value=usage,
            details={
                "usage_percent": round(usage, 2),
                "cores": sample.cores,
                "load_average": list(sample.load_average),
                "model": sample.model,
            },
        )
    )


def classify_network(sample: NetworkSample, threshold: Threshold) -> MetricReport:
    """Classify on the combined rx+tx error counters."""
    errors = sample.total_errors
    return _logged(
        MetricReport(
            domain=MetricDomain.NETWORK,
            status=classify_value(errors, threshold),
            value=float(errors),
            details={
                "errors": errors,
                "rx_errors": sample.rx_errors,
                "tx_errors": sample.tx_errors,
                "interfaces": len(sample.interfaces),
                "interfaces_down": [i.name for i in sample.interfaces if not i.is_up],
                "connections": sample.connections,
                "has_errors": errors > 0,
            },
        )
    )


def classify_processes(sample: ProcessSample, threshold: Threshold) -> MetricReport:
    return _logged(
        MetricReport(
            domain=MetricDomain.PROCESSES,
            status=classify_value(sample.count, threshold),
            value=float(sample.count),
            details={
                "count": sample.count,
                "critical": [p.name for p in sample.critical],
                "top_by_cpu": [p.model_dump() for p in sample.top_by_cpu],
                "top_by_mem": [p.model_dump() for p in sample.top_by_mem],
            },
        )
    )


def classify_latency(sample: LatencySample, thresholds: LatencyThresholds) -> MetricReport:
    """Classify a latency probe with the avg-OR-p95 rule.

    CRIT if either avg or p95 reaches its CRIT line; otherwise WARN if
    either reaches its WARN line; otherwise OK.
    """
    stats = summarize(sample.samples)
    if stats.count == 0:
        return unknown_report(MetricDomain.LATENCY, "no latency samples")

    status = worst_status(
        [classify_value(stats.avg, thresholds.avg), classify_value(stats.p95, thresholds.p95)]
    )

    success_rate = sample.success_rate
    recommendations = []
    if status is MetricStatus.CRIT:
        recommendations.append("Latency is critically high - immediate investigation required")
    elif status is MetricStatus.WARN:
        recommendations.append("Latency is elevated - monitor closely")
    if success_rate < 100:
        recommendations.append(
            f"Success rate is {success_rate:.1f}% - check network connectivity"
        )
    if not stats.is_stable:
        recommendations.append("Latency is unstable with high variance")
    if stats.has_outliers:
        recommendations.append("High latency outliers detected - investigate network issues")
    if sample.errors:
        recommendations.append(
            f"Multiple errors occurred: {len(sample.errors)} out of {sample.attempts} attempts"
        )

    return _logged(
        MetricReport(
            domain=MetricDomain.LATENCY,
            status=status,
            value=stats.avg,
            details={
                "url": sample.url,
                "avg_ms": round(stats.avg),
                "p95_ms": round(stats.p95),
                "p99_ms": round(stats.p99),
                "min_ms": round(stats.min),
                "max_ms": round(stats.max),
                "success_rate": round(success_rate, 2),
                "errors": list(sample.errors),
                "is_stable": stats.is_stable,
                "has_outliers": stats.has_outliers,
                "recommendations": recommendations,
            },
            raw_sample=sample.samples,
        )
    )
