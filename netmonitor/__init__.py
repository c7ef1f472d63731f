"""netmonitor: continuous dual-path network latency monitor.

Probes an external host and the local gateway side by side and records
only the anomalous samples, with the gateway's status at the same
instant, so a problem can be placed on the LAN or on the Internet path.
"""

__version__ = "0.1.0"
