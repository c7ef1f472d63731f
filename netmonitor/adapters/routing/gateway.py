"""Routing-table gateway lookup adapter.

Implements GatewayPort by asking the operating system which next hop it
would use to reach a destination:

- Linux: ``ip route get <destination>`` and the address after ``via``
- macOS: ``route -n get <destination>`` and the ``gateway:`` line
- Windows: a single ping with a TTL of 1, answered by the first hop
  with "TTL expired in transit"
"""

import asyncio
import contextlib
import logging
import re
import sys

from netmonitor.core.errors import GatewayLookupError
from netmonitor.core.ports import GatewayPort

logger = logging.getLogger(__name__)

LOOKUP_TIMEOUT_SECONDS = 5

# Wait for the first hop's answer to the TTL-1 ping on Windows
FIRST_HOP_WAIT_MS = 1000

_FIRST_HOP_PATTERN = re.compile(
    r"reply from ([0-9a-f.:]+): ttl expired", re.IGNORECASE
)


class SystemRouteGatewayLookup(GatewayPort):
    """Finds the next hop for a destination using routing tools."""

    def __init__(self, platform: str | None = None):
        """Initialize gateway lookup.

        Args:
            platform: sys.platform style identifier. Defaults to the
                running platform.
        """
        self.platform = platform or sys.platform

    @property
    def _is_windows(self) -> bool:
        return self.platform.startswith("win")

    def build_command(self, destination: str) -> list[str]:
        """Build the argv for a route query.

        Raises:
            GatewayLookupError: If the platform is not supported.
        """
        if self.platform.startswith("linux"):
            return ["ip", "route", "get", destination]
        if self.platform == "darwin":
            return ["route", "-n", "get", destination]
        if self._is_windows:
            return [
                "ping", "-n", "1", "-i", "1", "-w", str(FIRST_HOP_WAIT_MS), destination,
            ]
        raise GatewayLookupError(
            f"Gateway lookup is not supported on platform {self.platform}"
        )

    def parse_output(self, output: str) -> str | None:
        """Extract the gateway address from route query output."""
        if self.platform == "darwin":
            for line in output.splitlines():
                key, _, value = line.strip().partition(":")
                if key == "gateway" and value.strip():
                    return value.strip()
            return None

        if self._is_windows:
            match = _FIRST_HOP_PATTERN.search(output)
            return match.group(1) if match else None

        parts = output.split()
        if "via" in parts:
            via_idx = parts.index("via")
            if via_idx + 1 < len(parts):
                return parts[via_idx + 1]
        # Directly connected destinations have no gateway
        return None

    async def gateway_for(self, destination: str) -> str | None:
        """Ask the routing table for destination's gateway."""
        cmd = self.build_command(destination)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise GatewayLookupError(f"Routing tool not found: {cmd[0]}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=LOOKUP_TIMEOUT_SECONDS
            )
        except asyncio.TimeoutError as e:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise GatewayLookupError(
                f"{' '.join(cmd)} timed out after {LOOKUP_TIMEOUT_SECONDS}s"
            ) from e

        # A TTL-1 ping never gets a normal echo reply, so its exit status
        # carries no meaning; the output decides.
        if proc.returncode != 0 and not self._is_windows:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise GatewayLookupError(
                f"{' '.join(cmd)} failed with status {proc.returncode}: {detail}"
            )

        gateway = self.parse_output(stdout.decode("utf-8", errors="replace"))
        logger.debug(f"Gateway for {destination}: {gateway}")
        return gateway
