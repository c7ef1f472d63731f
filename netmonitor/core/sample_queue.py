"""Hand-off channel between the sampling and evaluation loops."""

import asyncio

from .models import Sample


class SampleQueue:
    """Unbounded FIFO of samples with one producer and one consumer.

    push never blocks, so the sampler is never held back by the
    evaluator's pace. drain takes everything queued at call time, in
    insertion order, and transfers ownership to the caller.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Sample] = asyncio.Queue()

    def push(self, sample: Sample) -> None:
        self._queue.put_nowait(sample)

    def drain(self) -> list[Sample]:
        samples: list[Sample] = []
        while True:
            try:
                samples.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return samples

    def __len__(self) -> int:
        return self._queue.qsize()
