"""Daemon scheduler adapter.

Implements the two long-running asyncio loops that drive the monitor:

- the sampling loop, paced so each tick starts one sampling interval
  after the previous tick started (not after its probes finished);
- the evaluation loop, which drains and records on a coarser cadence.
"""

import asyncio
import contextlib
import logging
import signal
from typing import cast

from netmonitor.core.errors import MonitorError
from netmonitor.core.models import EvaluationResult
from netmonitor.core.ports import EvaluationPort, SamplingPort

logger = logging.getLogger(__name__)


class DaemonScheduler:
    """Asyncio-based daemon running the sampling and evaluation loops."""

    def __init__(
        self,
        sampling_port: SamplingPort | None = None,
        evaluation_port: EvaluationPort | None = None,
        sampling_interval_seconds: float = 0.1,
        evaluation_interval_seconds: float = 10.0,
        drain_on_shutdown: bool = True,
    ):
        """Initialize daemon scheduler.

        Args:
            sampling_port: SamplingPort implementation driven once per tick.
            evaluation_port: EvaluationPort implementation driven once per cycle.
            sampling_interval_seconds: Minimum spacing between tick starts.
            evaluation_interval_seconds: Pause between evaluation cycles.
            drain_on_shutdown: Run one last evaluation cycle after the loops
                stop so queued samples are not lost.

        Raises:
            ValueError: If either interval is not positive.
        """
        if sampling_interval_seconds <= 0:
            raise ValueError("sampling_interval_seconds must be positive")
        if evaluation_interval_seconds <= 0:
            raise ValueError("evaluation_interval_seconds must be positive")

        self.sampling_port = sampling_port
        self.evaluation_port = evaluation_port
        self.sampling_interval_seconds = sampling_interval_seconds
        self.evaluation_interval_seconds = evaluation_interval_seconds
        self.drain_on_shutdown = drain_on_shutdown
        self.running = False
        self._sampling_task: asyncio.Task[None] | None = None
        self._evaluation_task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None
        self._signals_installed = False

    def _require_ports(self) -> tuple[SamplingPort, EvaluationPort]:
        if self.sampling_port is None or self.evaluation_port is None:
            raise ValueError(
                "sampling_port and evaluation_port must be set before starting the scheduler"
            )
        return self.sampling_port, self.evaluation_port

    async def start(self) -> None:
        """Run both loops until stopped or until the sampling loop fails.

        Raises:
            ValueError: If either port is not set.
            MonitorError: If the sampling loop raised. The evaluation loop
                is stopped and queued samples are drained first.
        """
        self._require_ports()

        if self.running:
            logger.warning("Daemon scheduler already running")
            return

        self.running = True
        logger.info(
            f"Starting daemon scheduler: sampling every "
            f"{self.sampling_interval_seconds * 1000:.0f}ms, evaluating every "
            f"{self.evaluation_interval_seconds:.1f}s"
        )

        self._setup_signal_handlers()

        self._stop_event = asyncio.Event()
        self._sampling_task = asyncio.create_task(self._sampling_loop())
        self._evaluation_task = asyncio.create_task(self._evaluation_loop())

        try:
            await self._sampling_task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # Our caller was cancelled, not just the sampling loop;
                # drain in finally, then let the cancellation through
                logger.info("Daemon scheduler cancelled")
                raise
            logger.info("Sampling loop cancelled")
        except Exception as e:
            logger.critical(f"Sampling loop failed, stopping monitor: {e}", exc_info=True)
            raise MonitorError(f"Sampling loop failed: {e}") from e
        finally:
            self.running = False
            self._remove_signal_handlers()
            await self._shutdown_evaluation()
            logger.info("Daemon scheduler stopped")

    async def stop(self) -> None:
        """Stop both loops. start() returns once shutdown completes."""
        if not self.running:
            return

        logger.info("Stopping daemon scheduler...")
        self.running = False

        if self._sampling_task and not self._sampling_task.done():
            self._sampling_task.cancel()

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        try:
            loop = asyncio.get_running_loop()

            def _handle_signal(sig: int) -> None:
                logger.info(f"Received signal {sig}, initiating graceful shutdown...")
                asyncio.create_task(self.stop())

            loop.add_signal_handler(
                signal.SIGTERM, _handle_signal, signal.SIGTERM
            )
            loop.add_signal_handler(signal.SIGINT, _handle_signal, signal.SIGINT)
            self._signals_installed = True
        except NotImplementedError:
            # Signal handlers not available on Windows
            logger.debug("Signal handlers not available on this platform")
        except Exception as e:
            logger.warning(f"Failed to set up signal handlers: {e}")

    def _remove_signal_handlers(self) -> None:
        if not self._signals_installed:
            return
        loop = asyncio.get_running_loop()
        loop.remove_signal_handler(signal.SIGTERM)
        loop.remove_signal_handler(signal.SIGINT)
        self._signals_installed = False

    @staticmethod
    def _remaining_delay(deadline: float, now: float) -> float:
        """Time left until deadline; never negative."""
        return max(0.0, deadline - now)

    async def _sampling_loop(self) -> None:
        """Tick loop. Exceptions are fatal and propagate to start()."""
        sampling_port = cast(SamplingPort, self.sampling_port)
        loop = asyncio.get_running_loop()
        tick_number = 0

        while self.running:
            tick_number += 1
            # Anchor pacing to tick start so slow probes cannot cause drift
            deadline = loop.time() + self.sampling_interval_seconds

            await sampling_port.execute_tick()

            now = loop.time()
            delay = self._remaining_delay(deadline, now)
            if delay > 0:
                await asyncio.sleep(delay)
            else:
                logger.debug(
                    f"Tick #{tick_number} overran the sampling interval by "
                    f"{(now - deadline) * 1000:.0f}ms"
                )

    async def _evaluation_loop(self) -> None:
        """Evaluation loop. Failed cycles are logged and skipped.

        Waits on the stop event rather than sleeping so that shutdown
        never interrupts a cycle halfway through its writes.
        """
        stop_event = cast(asyncio.Event, self._stop_event)
        cycle_number = 0

        while not stop_event.is_set():
            cycle_number += 1
            await self._run_evaluation_cycle(cycle_number)

            try:
                await asyncio.wait_for(
                    stop_event.wait(), timeout=self.evaluation_interval_seconds
                )
            except asyncio.TimeoutError:
                continue

    async def _run_evaluation_cycle(self, cycle_number: int) -> EvaluationResult | None:
        evaluation_port = cast(EvaluationPort, self.evaluation_port)
        try:
            result = await evaluation_port.execute_evaluation_cycle()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                f"Error in evaluation cycle #{cycle_number}: {e}", exc_info=True
            )
            return None

        message = (
            f"Evaluation cycle #{cycle_number}: {result.samples_processed} samples, "
            f"{result.incidents_recorded} incidents, {result.write_failures} write failures"
        )
        if result.incidents_recorded or result.write_failures:
            logger.info(message)
        else:
            logger.debug(message)
        return result

    async def _shutdown_evaluation(self) -> None:
        """Stop the evaluation loop and drain what is still queued."""
        if self._stop_event is not None:
            self._stop_event.set()

        if self._evaluation_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._evaluation_task
            self._evaluation_task = None

        if self.drain_on_shutdown:
            logger.debug("Draining queued samples before exit")
            await self._run_evaluation_cycle(cycle_number=0)

    async def run_once(self) -> EvaluationResult:
        """Run a single tick followed by a single evaluation cycle.

        Raises:
            ValueError: If either port is not set.
        """
        sampling_port, evaluation_port = self._require_ports()

        logger.info("Running single sampling tick")
        sample = await sampling_port.execute_tick()
        result = await evaluation_port.execute_evaluation_cycle()
        logger.info(
            f"Sample at {sample.started_at.isoformat()} evaluated: "
            f"{result.incidents_recorded} incidents recorded"
        )
        return result
