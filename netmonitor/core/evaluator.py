"""Evaluation cycle logic for the monitor.

This module implements the consumer side of the pipeline: it drains
queued samples, classifies them, and writes incident records for the
anomalous ones.
"""

import logging
from datetime import datetime, timezone

from .classifier import IncidentClassifier
from .models import EvaluationResult
from .ports import EvaluationPort, IncidentSinkPort
from .sample_queue import SampleQueue

logger = logging.getLogger(__name__)


class DiagnosticsService(EvaluationPort):
    """Implements the evaluation cycle.

    This service orchestrates:
    - Draining every sample queued since the previous cycle
    - Classifying each sample in tick order
    - Writing incident records to each sink

    A sink failure loses that one record on that one sink; it never
    stops the cycle or the remaining sinks.
    """

    def __init__(
        self,
        queue: SampleQueue,
        classifier: IncidentClassifier,
        sinks: list[IncidentSinkPort],
    ):
        self.queue = queue
        self.classifier = classifier
        self.sinks = sinks

    async def execute_evaluation_cycle(self) -> EvaluationResult:
        """Drain, classify and record. Returns a summary of the cycle."""
        now = datetime.now(timezone.utc)
        samples = self.queue.drain()

        incidents_recorded = 0
        write_failures = 0

        for sample in samples:
            record = self.classifier.format_incident(sample)
            if record is None:
                continue

            incidents_recorded += 1
            for sink in self.sinks:
                try:
                    await sink.write(record)
                except Exception as e:
                    write_failures += 1
                    logger.error(
                        f"Failed to write incident for sample at "
                        f"{sample.started_at.isoformat()} to {type(sink).__name__}: {e}",
                        exc_info=True,
                    )
                    # Continue with the remaining sinks and samples

        return EvaluationResult(
            samples_processed=len(samples),
            incidents_recorded=incidents_recorded,
            timestamp=now,
            write_failures=write_failures,
        )
