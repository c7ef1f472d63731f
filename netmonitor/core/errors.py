"""Exception hierarchy for the netmonitor system.

Probe failures are deliberately absent: they are expected outcomes and are
carried as data on ProbeOutcome. Exceptions here are either fatal (startup,
scheduler) or raised by adapters at a port boundary.
"""


class NetMonitorError(Exception):
    """Base class for all netmonitor errors."""


class StartupError(NetMonitorError):
    """The monitor cannot start: no usable target could be determined."""


class ResolutionError(StartupError):
    """The external host name could not be resolved."""


class GatewayLookupError(StartupError):
    """The routing table could not be queried for a gateway."""


class EchoError(NetMonitorError):
    """An ICMP echo could not be sent or its result could not be read.

    Raised by echo transports and converted into ProbeOutcome.error_message
    by the ProbeExecutor.
    """


class MonitorError(NetMonitorError):
    """Fatal fault in the sampling loop outside the isolated probe calls."""
