"""Probe execution: one ICMP echo, converted into a ProbeOutcome."""

import logging

from .models import ProbeOutcome
from .ports import EchoTransportPort

logger = logging.getLogger(__name__)


class ProbeExecutor:
    """Issues single echo probes with a fixed timeout and payload.

    probe() never raises for probe faults. Whatever the transport throws
    is captured as the outcome's error_message. Only task cancellation
    propagates.
    """

    def __init__(
        self,
        transport: EchoTransportPort,
        timeout_ms: int,
        payload: bytes,
        dont_fragment: bool = True,
    ):
        self.transport = transport
        self.timeout_ms = timeout_ms
        self.payload = payload
        self.dont_fragment = dont_fragment

    async def probe(self, address: str) -> ProbeOutcome:
        """Send one echo request to address and report what happened."""
        try:
            reply = await self.transport.echo(
                address,
                self.timeout_ms,
                self.payload,
                dont_fragment=self.dont_fragment,
            )
        except Exception as e:
            logger.debug(f"Probe to {address} raised {type(e).__name__}: {e}")
            return ProbeOutcome.from_error(_describe(e))

        return ProbeOutcome.from_reply(reply)


def _describe(error: Exception) -> str:
    """Render an exception as a one-line failure reason."""
    message = str(error).strip()
    return message or type(error).__name__
