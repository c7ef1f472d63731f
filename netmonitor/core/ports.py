"""Port interfaces for the netmonitor system.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - EchoTransportPort: Send one ICMP echo request
   - ResolverPort: Resolve the external host name
   - GatewayPort: Find the next hop toward a destination
   - IncidentSinkPort: Persist or display incident records

2. **Driving Ports** (the scheduler calls into core)
   - SamplingPort: Run one sampling tick
   - EvaluationPort: Run one evaluation cycle
"""

from abc import ABC, abstractmethod

from .models import EchoReply, EvaluationResult, Sample


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class EchoTransportPort(ABC):
    """Port for the ICMP echo primitive.

    The ProbeExecutor is the sole caller. Implementations must scope any
    socket or process they use to a single call, and must enforce
    timeout_ms themselves.
    """

    @abstractmethod
    async def echo(
        self,
        address: str,
        timeout_ms: int,
        payload: bytes,
        dont_fragment: bool = True,
    ) -> EchoReply:
        """Send one echo request and wait for its reply.

        Args:
            address: Host name or IP address to probe.
            timeout_ms: How long to wait for a reply.
            payload: Bytes to carry in the echo request.
            dont_fragment: Set the IP don't-fragment flag if supported.

        Returns:
            EchoReply. A timeout or an ICMP error is a reply with a
            non-success status, not an exception.

        Raises:
            Exception: If the echo could not be sent or read at all
                (permission denied, unknown host, missing binary).
                The caller converts it into a failed ProbeOutcome.
        """


class ResolverPort(ABC):
    """Port for host name resolution."""

    @abstractmethod
    async def resolve(self, hostname: str) -> list[str]:
        """Resolve a host name to IP addresses.

        Args:
            hostname: Name to resolve.

        Returns:
            Addresses in resolver preference order. May be empty.

        Raises:
            ResolutionError: If resolution fails.
        """


class GatewayPort(ABC):
    """Port for routing-table lookups."""

    @abstractmethod
    async def gateway_for(self, destination: str) -> str | None:
        """Find the gateway used to reach a destination.

        Args:
            destination: IP address of the destination.

        Returns:
            Gateway IP address, or None if the route has no gateway.

        Raises:
            GatewayLookupError: If the routing table cannot be queried.
        """


class IncidentSinkPort(ABC):
    """Port for writing formatted incident records."""

    @abstractmethod
    async def write(self, record: str) -> None:
        """Write one incident record.

        Args:
            record: Fully formatted incident text, including its
                trailing blank line.

        Raises:
            Exception: If the record could not be written. The
                evaluator logs the failure and carries on.
        """


# ============================================================================
# DRIVING PORTS (The scheduler calls into core)
# ============================================================================


class SamplingPort(ABC):
    """Port for producing samples, one tick at a time."""

    @abstractmethod
    async def execute_tick(self) -> Sample:
        """Probe both targets concurrently and enqueue the joined sample.

        Returns:
            The sample that was enqueued.

        Raises:
            Exception: Only for faults outside the probes themselves;
                these are fatal to the monitor.
        """


class EvaluationPort(ABC):
    """Port for consuming queued samples."""

    @abstractmethod
    async def execute_evaluation_cycle(self) -> EvaluationResult:
        """Drain the queue, classify every sample, record anomalies.

        Returns:
            EvaluationResult summarising the cycle.
        """
