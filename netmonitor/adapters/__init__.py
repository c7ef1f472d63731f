"""External adapters for the netmonitor system.

This package contains all external dependencies (ping binaries, the
ping3 library, the system resolver, routing tools, the filesystem) and
provides implementations of the core port interfaces.

Adapter Organization:

- transport/: ICMP echo primitives (system ping, ping3)
- resolver/: Host name resolution
- routing/: Gateway lookup from the routing table
- notification/: Incident sinks (log file, stdout)
- scheduler/: Daemon driving the sampling and evaluation loops
"""
