"""Adaptive scheduler for monitoring cycles.

State machine: IDLE -> RUNNING on trigger, RUNNING -> WAITING when a cycle
finishes (arming a timer for ``next_check_in - now``), WAITING -> RUNNING
when the timer fires. There is no terminal state; ``stop()`` cancels the
pending timer but lets an in-flight cycle finish. Cycles never overlap
because the next timer is armed only after the current cycle completes.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from sre_monitor.pipeline.types import CycleResult
from sre_monitor.telemetry import (
    NEXT_CHECK_SCHEDULED,
    SCHEDULER_ALREADY_RUNNING,
    SCHEDULER_CYCLE_ERROR,
    SCHEDULER_STARTED,
    SCHEDULER_STATE_TRANSITION,
    SCHEDULER_STOPPED,
    get_logger,
)

if TYPE_CHECKING:
    from sre_monitor.config.settings import AppConfig
    from sre_monitor.pipeline.workflow import MonitoringPipeline

log = get_logger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    WAITING = "waiting"


class MonitorScheduler:
    """Runs monitoring cycles and re-arms itself from each analysis.

    Usage:
        scheduler = MonitorScheduler(pipeline)
        await scheduler.start()  # Runs in background
        # ... later ...
        await scheduler.stop()

    Attributes:
        next_check_in: Absolute time of the next cycle; written once per
            cycle, read once to arm the timer.
        last_result: Result of the most recent cycle.
        cycles_completed: Number of finished cycles.
    """

    def __init__(
        self,
        pipeline: "MonitoringPipeline",
        min_interval_seconds: float = 30.0,
        max_interval_seconds: float = 3600.0,
        on_cycle: Callable[[CycleResult], None] | None = None,
    ) -> None:
        if min_interval_seconds > max_interval_seconds:
            raise ValueError("min_interval_seconds must not exceed max_interval_seconds")
        self.pipeline = pipeline
        self.min_interval_seconds = min_interval_seconds
        self.max_interval_seconds = max_interval_seconds
        self.on_cycle = on_cycle

        self.next_check_in: datetime | None = None
        self.last_result: CycleResult | None = None
        self.cycles_completed = 0

        self._state = SchedulerState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._wake = asyncio.Event()
        self._stopping = False

    @classmethod
    def from_settings(
        cls,
        config: "AppConfig",
        pipeline: "MonitoringPipeline",
        on_cycle: Callable[[CycleResult], None] | None = None,
    ) -> "MonitorScheduler":
        return cls(
            pipeline,
            min_interval_seconds=config.check_interval_min_seconds,
            max_interval_seconds=config.check_interval_max_seconds,
            on_cycle=on_cycle,
        )

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        """True while the background loop is alive."""
        return self._task is not None and not self._task.done()

    def _set_state(self, new_state: SchedulerState) -> None:
        if new_state is self._state:
            return
        log.debug(
            SCHEDULER_STATE_TRANSITION,
            from_state=self._state.value,
            to_state=new_state.value,
        )
        self._state = new_state

    def compute_delay(self, next_check_in: datetime, now: datetime | None = None) -> float:
        """Seconds until ``next_check_in``, clamped to the configured bounds."""
        now = now or datetime.now(timezone.utc)
        delay = (next_check_in - now).total_seconds()
        return min(max(delay, self.min_interval_seconds), self.max_interval_seconds)

    async def start(self) -> None:
        """Start the scheduling loop; the first cycle runs immediately."""
        if self.running:
            log.warning(SCHEDULER_ALREADY_RUNNING)
            return

        self._stopping = False
        self._wake.clear()
        self._task = asyncio.create_task(self._loop())
        log.info(
            SCHEDULER_STARTED,
            min_interval_seconds=self.min_interval_seconds,
            max_interval_seconds=self.max_interval_seconds,
        )

    async def stop(self) -> None:
        """Cancel the pending timer and wait for any in-flight cycle."""
        if self._task is None:
            return

        self._stopping = True
        self._wake.set()
        await self._task
        self._task = None
        log.info(SCHEDULER_STOPPED, cycles_completed=self.cycles_completed)

    async def trigger(self) -> None:
        """Request a cycle now.

        Starts the loop when idle and fires the timer early when waiting.
        While a cycle is running this is a no-op.
        """
        if not self.running:
            await self.start()
        elif self._state is SchedulerState.WAITING:
            self._wake.set()

    async def run_once(self) -> CycleResult:
        """Run a single cycle outside the loop and record its check-in.

        Raises:
            RuntimeError: If the background loop is active.
        """
        if self.running:
            raise RuntimeError("scheduler loop is active; use trigger() instead")

        self._set_state(SchedulerState.RUNNING)
        try:
            result = await self.pipeline.run_cycle()
            self._record(result)
            return result
        finally:
            self._set_state(SchedulerState.IDLE)

    def _record(self, result: CycleResult) -> None:
        self.last_result = result
        self.next_check_in = result.next_execution
        self.cycles_completed += 1
        if self.on_cycle is not None:
            self.on_cycle(result)

    async def _loop(self) -> None:
        try:
            while not self._stopping:
                self._set_state(SchedulerState.RUNNING)
                delay = float(self.min_interval_seconds)
                try:
                    result = await self.pipeline.run_cycle()
                    self._record(result)
                    delay = self.compute_delay(result.next_execution)
                except Exception as e:
                    # Pipeline stages degrade on their own; this only guards the loop
                    log.error(SCHEDULER_CYCLE_ERROR, error=str(e), exc_info=True)

                if self._stopping:
                    break

                self._wake.clear()
                self._set_state(SchedulerState.WAITING)
                log.info(
                    NEXT_CHECK_SCHEDULED,
                    delay_seconds=round(delay, 1),
                    next_check_in=self.next_check_in.isoformat() if self.next_check_in else None,
                )
                try:
                    await asyncio.wait_for(self._wake.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._set_state(SchedulerState.IDLE)
