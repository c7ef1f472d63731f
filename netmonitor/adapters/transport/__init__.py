"""Echo transport adapters.

Implementations send a single ICMP echo request per call:
- System ping binary (default, honours don't-fragment)
- ping3 library (raw or datagram ICMP socket)
"""
