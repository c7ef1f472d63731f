"""Domain models for the netmonitor system.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EchoStatus(Enum):
    """Status of a completed ICMP echo exchange.

    Values are human-readable and appear verbatim in incident records.
    """

    SUCCESS = "success"
    TIMED_OUT = "timed out"
    DESTINATION_HOST_UNREACHABLE = "destination host unreachable"
    DESTINATION_NET_UNREACHABLE = "destination net unreachable"
    PACKET_TOO_BIG = "packet too big"
    TTL_EXPIRED = "ttl expired"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EchoReply:
    """Result of an echo exchange that ran to completion."""

    status: EchoStatus
    round_trip_ms: float | None = None

    def __post_init__(self) -> None:
        """Validate reply invariants on creation."""
        if self.round_trip_ms is not None and self.round_trip_ms < 0:
            raise ValueError(
                f"round_trip_ms must be non-negative, got {self.round_trip_ms}"
            )
        if self.status == EchoStatus.SUCCESS and self.round_trip_ms is None:
            raise ValueError("a successful reply must carry round_trip_ms")

    @property
    def succeeded(self) -> bool:
        return self.status == EchoStatus.SUCCESS


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one probe attempt.

    Normally exactly one of reply or error_message is set. Both or
    neither are possible and every consumer must cope with that.
    """

    reply: EchoReply | None = None
    error_message: str | None = None

    @classmethod
    def from_reply(cls, reply: EchoReply) -> "ProbeOutcome":
        return cls(reply=reply)

    @classmethod
    def from_error(cls, message: str) -> "ProbeOutcome":
        return cls(error_message=message)


@dataclass(frozen=True)
class Sample:
    """A joined pair of external and gateway outcomes for one tick.

    started_at is captured before either probe is issued, so it orders
    samples by tick start rather than by probe completion.
    """

    started_at: datetime
    external: ProbeOutcome
    gateway: ProbeOutcome

    def __post_init__(self) -> None:
        """Validate sample invariants on creation."""
        if self.started_at.tzinfo is None:
            raise ValueError("started_at must be timezone-aware (UTC)")


class Classification(Enum):
    """Outcome of evaluating a sample's external path."""

    HEALTHY = "healthy"
    EXTERNAL_TRANSPORT_ERROR = "external_transport_error"
    EXTERNAL_PING_FAILURE = "external_ping_failure"
    EXTERNAL_LATENCY_EXCEEDED = "external_latency_exceeded"

    @property
    def is_anomalous(self) -> bool:
        return self is not Classification.HEALTHY


@dataclass(frozen=True)
class MonitorConfig:
    """Runtime parameters shared by the sampling and evaluation loops.

    Built once at startup from Settings and passed to each service at
    construction.
    """

    external_host: str
    probe_timeout_ms: int = 1000
    sampling_interval_ms: int = 100
    latency_threshold_ms: float = 120
    evaluation_interval_multiplier: int = 100
    payload: bytes = b"a" * 32
    dont_fragment: bool = True

    def __post_init__(self) -> None:
        """Validate configuration invariants on creation."""
        if not self.external_host or not self.external_host.strip():
            raise ValueError("external_host must be a non-empty string")
        if self.probe_timeout_ms <= 0:
            raise ValueError("probe_timeout_ms must be positive")
        if self.sampling_interval_ms <= 0:
            raise ValueError("sampling_interval_ms must be positive")
        if self.latency_threshold_ms < 0:
            raise ValueError("latency_threshold_ms must be non-negative")
        if self.evaluation_interval_multiplier <= 0:
            raise ValueError("evaluation_interval_multiplier must be positive")
        if not self.payload:
            raise ValueError("payload must not be empty")

    @property
    def sampling_interval_seconds(self) -> float:
        return self.sampling_interval_ms / 1000

    @property
    def evaluation_interval_seconds(self) -> float:
        return self.sampling_interval_seconds * self.evaluation_interval_multiplier


@dataclass(frozen=True)
class MonitorTargets:
    """The two probe targets, determined once at startup."""

    external_host: str
    external_address: str
    gateway_address: str


@dataclass(frozen=True)
class EvaluationResult:
    """Summary of an evaluation cycle execution."""

    samples_processed: int
    incidents_recorded: int
    timestamp: datetime
    write_failures: int = 0  # Sink writes that raised during this cycle
