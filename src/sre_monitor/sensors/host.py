"""Host metrics provider using psutil.

Thin wrappers that read OS counters and return raw sensor samples. No
classification happens here; errors propagate to the collector, which
degrades the affected metric to UNKNOWN.
"""

import platform
import socket
import time
from typing import Protocol

import psutil  # type: ignore[import-untyped]

from sre_monitor.sensors.types import (
    CpuSample,
    DiskMount,
    DiskSample,
    MemorySample,
    NetworkInterface,
    NetworkSample,
    ProcessInfo,
    ProcessSample,
)
from sre_monitor.telemetry import DISK_USAGE_UNAVAILABLE, SENSOR_POLL, get_logger

log = get_logger(__name__)

# Filesystems that never fill up in a meaningful way
_PSEUDO_FILESYSTEMS = frozenset({"squashfs", "tmpfs", "devtmpfs", "overlay", "iso9660"})

TOP_PROCESS_COUNT = 10
CRITICAL_PROCESS_LIMIT = 5
CRITICAL_PROCESS_CPU_PERCENT = 50.0
CRITICAL_PROCESS_MEM_PERCENT = 20.0


def _process_cpu(proc: psutil.Process) -> float:
    try:
        return proc.cpu_percent(None) or 0.0
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return 0.0


class MetricsProvider(Protocol):
    """Source of raw host samples, one call per metric domain.

    Methods are synchronous and may block; the collector runs them in
    worker threads.
    """

    def disk(self) -> DiskSample: ...

    def memory(self) -> MemorySample: ...

    def cpu(self) -> CpuSample: ...

    def network(self) -> NetworkSample: ...

    def processes(self) -> ProcessSample: ...


class HostMetricsProvider:
    """MetricsProvider backed by psutil.

    Args:
        cpu_interval_seconds: Sampling window for ``psutil.cpu_percent``.
    """

    def __init__(self, cpu_interval_seconds: float = 0.5) -> None:
        self.cpu_interval_seconds = cpu_interval_seconds

    def disk(self) -> DiskSample:
        mounts: list[DiskMount] = []
        for part in psutil.disk_partitions(all=False):
            if part.fstype in _PSEUDO_FILESYSTEMS:
                continue
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except (OSError, PermissionError):
                # Unreadable mount points (e.g. empty CD drives) are skipped
                log.debug(DISK_USAGE_UNAVAILABLE, mount=part.mountpoint)
                continue
            mounts.append(
                DiskMount(
                    fs=part.device or "unknown",
                    mount=part.mountpoint or "unknown",
                    size=usage.total,
                    used=usage.used,
                    use=usage.percent,
                )
            )

        if not mounts:
            raise RuntimeError("No disk information available")

        log.debug(SENSOR_POLL, domain="disk", mounts=len(mounts))
        return DiskSample(mounts=tuple(mounts))

    def memory(self) -> MemorySample:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()
        log.debug(SENSOR_POLL, domain="memory", percent=vm.percent)
        return MemorySample(
            total=vm.total,
            used=vm.used,
            available=vm.available,
            free=vm.free,
            swap_total=swap.total,
            swap_used=swap.used,
            cached=getattr(vm, "cached", 0),
            buffers=getattr(vm, "buffers", 0),
        )

    def cpu(self) -> CpuSample:
        usage = psutil.cpu_percent(interval=self.cpu_interval_seconds)
        load_avg = psutil.getloadavg() if hasattr(psutil, "getloadavg") else (0.0, 0.0, 0.0)
        freq = psutil.cpu_freq()
        log.debug(SENSOR_POLL, domain="cpu", usage=usage)
        return CpuSample(
            usage_percent=usage,
            cores=psutil.cpu_count(logical=True) or 1,
            load_average=tuple(round(x, 2) for x in load_avg),
            speed_mhz=freq.current if freq else 0.0,
            model=platform.processor() or platform.machine() or "Unknown",
        )

    def network(self) -> NetworkSample:
        counters = psutil.net_io_counters(pernic=True)
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()

        interfaces = []
        for name, stat in stats.items():
            ipv4 = next(
                (a.address for a in addrs.get(name, []) if a.family == socket.AF_INET),
                "unknown",
            )
            interfaces.append(
                NetworkInterface(name=name, is_up=stat.isup, speed_mbps=stat.speed, address=ipv4)
            )

        try:
            connections = len(psutil.net_connections(kind="inet"))
        except (psutil.AccessDenied, PermissionError):
            connections = 0

        nics = counters.values()
        sample = NetworkSample(
            interfaces=tuple(interfaces),
            rx_bytes=sum(c.bytes_recv for c in nics),
            tx_bytes=sum(c.bytes_sent for c in nics),
            rx_packets=sum(c.packets_recv for c in nics),
            tx_packets=sum(c.packets_sent for c in nics),
            rx_errors=sum(c.errin for c in nics),
            tx_errors=sum(c.errout for c in nics),
            connections=connections,
        )
        log.debug(SENSOR_POLL, domain="network", errors=sample.total_errors)
        return sample

    def processes(self) -> ProcessSample:
        # A process's first cpu_percent() call always returns 0.0; prime every
        # counter, wait one sampling window, then read.
        procs = list(psutil.process_iter(["pid", "name"]))
        for proc in procs:
            _process_cpu(proc)
        time.sleep(self.cpu_interval_seconds)

        infos: list[ProcessInfo] = []
        for proc in procs:
            try:
                mem = proc.memory_percent()
            except (psutil.ZombieProcess, psutil.AccessDenied):
                mem = 0.0
            except psutil.NoSuchProcess:
                continue  # exited during the sampling window
            infos.append(
                ProcessInfo(
                    pid=proc.info.get("pid") or 0,
                    name=proc.info.get("name") or "unknown",
                    cpu=round(_process_cpu(proc), 2),
                    mem=round(mem or 0.0, 2),
                )
            )

        top_by_cpu = sorted((p for p in infos if p.cpu > 0), key=lambda p: p.cpu, reverse=True)
        top_by_mem = sorted((p for p in infos if p.mem > 0), key=lambda p: p.mem, reverse=True)
        critical = [
            p
            for p in infos
            if p.cpu > CRITICAL_PROCESS_CPU_PERCENT or p.mem > CRITICAL_PROCESS_MEM_PERCENT
        ]

        log.debug(SENSOR_POLL, domain="processes", count=len(infos))
        return ProcessSample(
            count=len(infos),
            top_by_cpu=tuple(top_by_cpu[:TOP_PROCESS_COUNT]),
            top_by_mem=tuple(top_by_mem[:TOP_PROCESS_COUNT]),
            critical=tuple(critical[:CRITICAL_PROCESS_LIMIT]),
        )
