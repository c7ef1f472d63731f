"""Sampling tick logic for the monitor.

One tick probes the external host and the gateway concurrently, joins
both outcomes into a Sample, and hands it to the evaluator through the
SampleQueue. Pacing between ticks is the scheduler's concern.
"""

import asyncio
import logging
from datetime import datetime, timezone

from .models import MonitorTargets, Sample
from .ports import SamplingPort
from .probe import ProbeExecutor
from .sample_queue import SampleQueue

logger = logging.getLogger(__name__)


class SamplingService(SamplingPort):
    """Implements the sampling tick.

    This service orchestrates:
    - Capturing the tick's start timestamp
    - Fanning out the external and gateway probes
    - Joining both outcomes into a single Sample
    - Enqueueing the Sample for evaluation
    """

    def __init__(
        self,
        executor: ProbeExecutor,
        targets: MonitorTargets,
        queue: SampleQueue,
    ):
        self.executor = executor
        self.targets = targets
        self.queue = queue

    async def execute_tick(self) -> Sample:
        """Probe both paths concurrently and enqueue the joined sample.

        Probe faults are already encoded in the outcomes; anything raised
        here is a fault in the tick itself and is left to propagate.
        """
        started_at = datetime.now(timezone.utc)

        external, gateway = await asyncio.gather(
            self.executor.probe(self.targets.external_host),
            self.executor.probe(self.targets.gateway_address),
        )

        sample = Sample(started_at=started_at, external=external, gateway=gateway)
        self.queue.push(sample)
        logger.debug(f"Enqueued sample started at {started_at.isoformat()} ({len(self.queue)} queued)")
        return sample
