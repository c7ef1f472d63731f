"""Core domain logic for the netmonitor system.

This package contains zero external dependencies and represents
the pure monitoring logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .models import (
    Classification,
    EchoReply,
    EchoStatus,
    EvaluationResult,
    MonitorConfig,
    MonitorTargets,
    ProbeOutcome,
    Sample,
)

__all__ = [
    "Classification",
    "EchoReply",
    "EchoStatus",
    "EvaluationResult",
    "MonitorConfig",
    "MonitorTargets",
    "ProbeOutcome",
    "Sample",
]
