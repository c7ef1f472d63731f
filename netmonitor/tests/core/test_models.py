"""Unit tests for core domain models."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from netmonitor.core.models import (
    Classification,
    EchoReply,
    EchoStatus,
    MonitorConfig,
    ProbeOutcome,
    Sample,
)


class TestEchoReply:
    """Test EchoReply invariants."""

    def test_success_requires_round_trip(self) -> None:
        with pytest.raises(ValueError, match="round_trip_ms"):
            EchoReply(status=EchoStatus.SUCCESS)

    def test_negative_round_trip_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=-1.0)

    def test_failure_without_round_trip_allowed(self) -> None:
        reply = EchoReply(status=EchoStatus.TIMED_OUT)
        assert reply.round_trip_ms is None
        assert not reply.succeeded

    def test_succeeded(self) -> None:
        assert EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=0.0).succeeded


class TestProbeOutcome:
    """Test ProbeOutcome constructors."""

    def test_from_reply(self) -> None:
        reply = EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=12.0)
        outcome = ProbeOutcome.from_reply(reply)
        assert outcome.reply is reply
        assert outcome.error_message is None

    def test_from_error(self) -> None:
        outcome = ProbeOutcome.from_error("Network unreachable")
        assert outcome.reply is None
        assert outcome.error_message == "Network unreachable"

    def test_neither_field_is_representable(self) -> None:
        outcome = ProbeOutcome()
        assert outcome.reply is None
        assert outcome.error_message is None


class TestSample:
    """Test Sample invariants."""

    def test_naive_timestamp_rejected(self) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            Sample(
                started_at=datetime(2026, 1, 1, 12, 0, 0),
                external=ProbeOutcome(),
                gateway=ProbeOutcome(),
            )

    def test_sample_is_immutable(self) -> None:
        sample = Sample(
            started_at=datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
            external=ProbeOutcome(),
            gateway=ProbeOutcome(),
        )
        with pytest.raises(FrozenInstanceError):
            sample.external = ProbeOutcome.from_error("late write")  # type: ignore[misc]


class TestClassification:
    """Test Classification helpers."""

    def test_only_healthy_is_not_anomalous(self) -> None:
        assert not Classification.HEALTHY.is_anomalous
        assert Classification.EXTERNAL_TRANSPORT_ERROR.is_anomalous
        assert Classification.EXTERNAL_PING_FAILURE.is_anomalous
        assert Classification.EXTERNAL_LATENCY_EXCEEDED.is_anomalous


class TestMonitorConfig:
    """Test MonitorConfig validation and derived intervals."""

    def test_defaults_match_reference_cadence(self) -> None:
        config = MonitorConfig(external_host="www.google.com")
        assert config.sampling_interval_seconds == pytest.approx(0.1)
        assert config.evaluation_interval_seconds == pytest.approx(10.0)
        assert config.payload == b"a" * 32

    def test_custom_multiplier(self) -> None:
        config = MonitorConfig(
            external_host="example.com",
            sampling_interval_ms=200,
            evaluation_interval_multiplier=5,
        )
        assert config.evaluation_interval_seconds == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"external_host": "  "},
            {"probe_timeout_ms": 0},
            {"sampling_interval_ms": -5},
            {"latency_threshold_ms": -1},
            {"evaluation_interval_multiplier": 0},
            {"payload": b""},
        ],
    )
    def test_invalid_values_rejected(self, overrides: dict) -> None:
        params = {"external_host": "example.com", **overrides}
        with pytest.raises(ValueError):
            MonitorConfig(**params)
