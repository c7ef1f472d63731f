"""Anomaly classification and incident formatting.

Everything here is a pure function of a Sample and the classifier's
fixed parameters, so evaluating the same sample twice yields the same
classification and the same text.
"""

from .models import Classification, ProbeOutcome, Sample

UNKNOWN_ERROR = "unknown error"


def format_ms(value: float) -> str:
    """Render a round trip time without noise: 150 -> '150', 0.42 -> '0.4'."""
    rounded = round(float(value), 1)
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.1f}"


def _status_text(outcome: ProbeOutcome) -> str:
    if outcome.reply is None:
        return UNKNOWN_ERROR
    return outcome.reply.status.value


class IncidentClassifier:
    """Classifies samples and formats incident records.

    Precedence for the external path (first match wins):
    transport error, then non-success status, then latency above the
    threshold. Gateway status is only described for anomalous samples.
    """

    def __init__(self, external_host: str, latency_threshold_ms: float):
        self.external_host = external_host
        self.latency_threshold_ms = latency_threshold_ms

    def classify(self, sample: Sample) -> Classification:
        external = sample.external
        if external.error_message is not None:
            return Classification.EXTERNAL_TRANSPORT_ERROR
        if external.reply is None or not external.reply.succeeded:
            return Classification.EXTERNAL_PING_FAILURE
        if external.reply.round_trip_ms > self.latency_threshold_ms:
            return Classification.EXTERNAL_LATENCY_EXCEEDED
        return Classification.HEALTHY

    def external_failure_line(
        self, sample: Sample, classification: Classification
    ) -> str:
        """Describe why the external path was flagged.

        Raises:
            ValueError: If classification is HEALTHY.
        """
        external = sample.external
        if classification is Classification.EXTERNAL_TRANSPORT_ERROR:
            return f"Error pinging {self.external_host}: {external.error_message}"
        if classification is Classification.EXTERNAL_PING_FAILURE:
            return f"Error pinging {self.external_host}: {_status_text(external)}"
        if classification is Classification.EXTERNAL_LATENCY_EXCEEDED:
            rtt = format_ms(external.reply.round_trip_ms)
            return f"Excessive RTT pinging {self.external_host}: {rtt}ms"
        raise ValueError("healthy samples have no failure line")

    @staticmethod
    def gateway_status_line(gateway: ProbeOutcome) -> str:
        if gateway.error_message is not None:
            return f"gateway probe failed: {gateway.error_message}"
        if gateway.reply is None or not gateway.reply.succeeded:
            return f"gateway probe failed: {_status_text(gateway)}"
        return f"gateway responded in {format_ms(gateway.reply.round_trip_ms)}ms"

    def format_incident(self, sample: Sample) -> str | None:
        """Format the incident record for a sample.

        Returns:
            The record text ending in a blank line, or None when the
            sample is healthy.
        """
        classification = self.classify(sample)
        if not classification.is_anomalous:
            return None

        lines = [
            sample.started_at.isoformat(),
            self.external_failure_line(sample, classification),
            self.gateway_status_line(sample.gateway),
        ]
        return "\n".join(lines) + "\n\n"
