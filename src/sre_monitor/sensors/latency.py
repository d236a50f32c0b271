"""Synthetic HTTP latency probe.

Performs a fixed number of sequential HEAD requests against one URL and
records the elapsed time of each. Attempts run one after another so the
probe's own concurrency does not skew the target's measured latency.

Failure policy: an attempt that times out or errors still contributes a
sample equal to the timeout, so averages and percentiles stay pessimistic
under partial failure. Network failures never raise; only an invalid probe
configuration does.
"""

import asyncio
import time

import httpx
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field

from sre_monitor.sensors.types import LatencySample
from sre_monitor.telemetry import (
    LATENCY_ATTEMPT_FAILED,
    LATENCY_PROBE_COMPLETED,
    LATENCY_PROBE_STARTED,
    get_logger,
)

log = get_logger(__name__)

USER_AGENT = "SRE-Monitoring-Tool/1.0"


class ProbeHTTPError(Exception):
    """Raised for a non-2xx response to a latency attempt."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"HTTP {status_code}: {reason}")
        self.status_code = status_code
        self.reason = reason


class LatencyProbeConfig(BaseModel):
    """Validated latency probe parameters.

    Construction raises ``pydantic.ValidationError`` for a malformed URL or
    out-of-range attempt/timeout values.
    """

    model_config = ConfigDict(frozen=True)

    url: AnyHttpUrl = Field(..., description="Target URL (http or https)")
    attempts: int = Field(5, ge=1, le=20, description="Number of sequential attempts")
    timeout_ms: int = Field(10000, ge=100, le=60000, description="Per-attempt timeout")
    pause_ms: int = Field(100, ge=0, le=5000, description="Pause between attempts")

    @property
    def max_duration_seconds(self) -> float:
        """Worst-case wall time of a full probe."""
        return self.attempts * (self.timeout_ms + self.pause_ms) / 1000.0


class LatencySampler:
    """Runs latency probes over an httpx client.

    Args:
        client: Optional shared ``httpx.AsyncClient``. When omitted, a client
            is created for each probe and closed afterwards.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def sample(self, config: LatencyProbeConfig) -> LatencySample:
        """Probe ``config.url`` ``config.attempts`` times.

        Args:
            config: Validated probe configuration.

        Returns:
            LatencySample with exactly ``attempts`` values.
        """
        if self._client is not None:
            return await self._run(self._client, config)

        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await self._run(client, config)

    async def _run(self, client: httpx.AsyncClient, config: LatencyProbeConfig) -> LatencySample:
        url = str(config.url)
        samples: list[float] = []
        errors: list[str] = []
        success_count = 0

        log.info(
            LATENCY_PROBE_STARTED,
            url=url,
            attempts=config.attempts,
            timeout_ms=config.timeout_ms,
        )

        for attempt in range(1, config.attempts + 1):
            try:
                latency_ms = await self._attempt(client, url, config.timeout_ms)
                samples.append(latency_ms)
                if latency_ms < config.timeout_ms:
                    success_count += 1
            except (httpx.HTTPError, ProbeHTTPError, OSError) as e:
                message = f"Attempt {attempt}: {e}"
                errors.append(message)
                samples.append(float(config.timeout_ms))
                log.debug(LATENCY_ATTEMPT_FAILED, url=url, attempt=attempt, error=str(e))

            if attempt < config.attempts and config.pause_ms > 0:
                await asyncio.sleep(config.pause_ms / 1000.0)

        result = LatencySample(
            url=url,
            attempts=config.attempts,
            timeout_ms=config.timeout_ms,
            samples=tuple(samples),
            success_count=success_count,
            errors=tuple(errors),
        )

        log.info(
            LATENCY_PROBE_COMPLETED,
            url=url,
            success_count=success_count,
            error_count=len(errors),
        )
        return result

    async def _attempt(self, client: httpx.AsyncClient, url: str, timeout_ms: int) -> float:
        """Time one HEAD request in milliseconds.

        A timeout returns ``timeout_ms`` instead of raising.

        Raises:
            ProbeHTTPError: On a non-2xx response.
            httpx.HTTPError: On transport failures other than timeouts.
        """
        timeout_s = timeout_ms / 1000.0
        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                client.head(url, headers={"User-Agent": USER_AGENT}, timeout=timeout_s),
                timeout=timeout_s,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return float(timeout_ms)

        if not response.is_success:
            raise ProbeHTTPError(response.status_code, response.reason_phrase)

        return (time.perf_counter() - start) * 1000.0
