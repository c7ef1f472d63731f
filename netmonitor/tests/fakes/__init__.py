"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeEchoTransportPort: Scripted echo replies and failures per address
- FakeIncidentSinkPort: Captured incident records for assertion
- FakeResolverPort: Canned resolution results
- FakeGatewayPort: Canned gateway lookups
- FakeSamplingPort: Recorded ticks with configurable duration
- FakeEvaluationPort: Recorded evaluation cycles
"""

from .network import FakeGatewayPort, FakeResolverPort
from .pipeline import FakeEvaluationPort, FakeSamplingPort
from .sink import FakeIncidentSinkPort
from .transport import FakeEchoTransportPort

__all__ = [
    "FakeEchoTransportPort",
    "FakeEvaluationPort",
    "FakeGatewayPort",
    "FakeIncidentSinkPort",
    "FakeResolverPort",
    "FakeSamplingPort",
]
