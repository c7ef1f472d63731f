"""DNS resolver adapter.

Implements ResolverPort with the event loop's getaddrinfo, which runs
the platform resolver in the default executor.
"""

import asyncio
import logging
import socket

from netmonitor.core.errors import ResolutionError
from netmonitor.core.ports import ResolverPort

logger = logging.getLogger(__name__)


class DnsResolver(ResolverPort):
    """Resolves host names through the system resolver."""

    def __init__(self, family: int = socket.AF_INET):
        """Initialize DNS resolver.

        Args:
            family: Address family to ask for. IPv4 by default, since
                the gateway lookup and echo probes are IPv4.
        """
        self.family = family

    async def resolve(self, hostname: str) -> list[str]:
        """Resolve hostname, de-duplicated in resolver order."""
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(
                hostname, None, family=self.family, type=socket.SOCK_STREAM
            )
        except (socket.gaierror, UnicodeError) as e:
            raise ResolutionError(f"Could not resolve {hostname}: {e}") from e

        addresses: list[str] = []
        for _family, _type, _proto, _canonname, sockaddr in infos:
            address = sockaddr[0]
            if address not in addresses:
                addresses.append(address)

        logger.debug(f"Resolved {hostname} to {addresses}")
        return addresses
