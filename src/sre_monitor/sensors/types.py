"""Pydantic models for raw sensor samples.

These records are what metrics providers return before classification.
They carry measurements only; no status or threshold information.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Sample(BaseModel):
    model_config = ConfigDict(frozen=True)


class DiskMount(_Sample):
    """Usage of one mounted filesystem."""

    fs: str = Field("unknown", description="Device or filesystem name")
    mount: str = Field("unknown", description="Mount point")
    size: int = Field(0, ge=0, description="Total size in bytes")
    used: int = Field(0, ge=0, description="Used bytes")
    use: float = Field(0.0, ge=0.0, description="Usage percentage")


class DiskSample(_Sample):
    """Per-mount disk usage."""

    mounts: tuple[DiskMount, ...] = ()


class MemorySample(_Sample):
    """Virtual memory and swap counters in bytes."""

    total: int = Field(..., ge=0)
    used: int = Field(..., ge=0)
    available: int = Field(0, ge=0)
    free: int = Field(0, ge=0)
    swap_total: int = Field(0, ge=0)
    swap_used: int = Field(0, ge=0)
    cached: int = Field(0, ge=0)
    buffers: int = Field(0, ge=0)

    @property
    def usage_percent(self) -> float:
        """Used/total as a percentage (0 when total is unknown)."""
        return (self.used / self.total) * 100.0 if self.total > 0 else 0.0

    @property
    def swap_usage_percent(self) -> float:
        return (self.swap_used / self.swap_total) * 100.0 if self.swap_total > 0 else 0.0


class CpuSample(_Sample):
    """Instantaneous CPU load."""

    usage_percent: float = Field(..., ge=0.0)
    cores: int = Field(1, ge=1)
    load_average: tuple[float, float, float] = (0.0, 0.0, 0.0)
    speed_mhz: float = Field(0.0, ge=0.0)
    model: str = "Unknown"


class NetworkInterface(_Sample):
    name: str
    is_up: bool
    speed_mbps: int = 0
    address: str = "unknown"


class NetworkSample(_Sample):
    """Counters summed over all interfaces, plus socket count."""

    interfaces: tuple[NetworkInterface, ...] = ()
    rx_bytes: int = Field(0, ge=0)
    tx_bytes: int = Field(0, ge=0)
    rx_packets: int = Field(0, ge=0)
    tx_packets: int = Field(0, ge=0)
    rx_errors: int = Field(0, ge=0)
    tx_errors: int = Field(0, ge=0)
    connections: int = Field(0, ge=0)

    @property
    def total_errors(self) -> int:
        return self.rx_errors + self.tx_errors


class ProcessInfo(_Sample):
    pid: int
    name: str
    cpu: float = 0.0
    mem: float = 0.0


class ProcessSample(_Sample):
    """Process table summary."""

    count: int = Field(..., ge=0)
    top_by_cpu: tuple[ProcessInfo, ...] = ()
    top_by_mem: tuple[ProcessInfo, ...] = ()
    critical: tuple[ProcessInfo, ...] = ()


class LatencySample(_Sample):
    """Outcome of one multi-attempt latency probe.

    ``samples`` always has one value per attempt: failed and timed-out
    attempts contribute ``timeout_ms``.
    """

    url: str
    attempts: int = Field(..., ge=1)
    timeout_ms: int = Field(..., ge=1)
    samples: tuple[float, ...]
    success_count: int = Field(..., ge=0)
    errors: tuple[str, ...] = ()

    @property
    def success_rate(self) -> float:
        """Successful attempts as a percentage of all attempts."""
        return (self.success_count / self.attempts) * 100.0
