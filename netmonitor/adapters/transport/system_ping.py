"""System ping echo transport.

Implements EchoTransportPort by running the platform's ping binary
once per probe. Each call owns its child process, which is killed if
the probe times out or is cancelled. Works without raw-socket
privileges and honours the don't-fragment flag.
"""

import asyncio
import contextlib
import logging
import math
import re
import sys

from netmonitor.core.errors import EchoError
from netmonitor.core.models import EchoReply, EchoStatus
from netmonitor.core.ports import EchoTransportPort

logger = logging.getLogger(__name__)

# Slack for process start-up on top of the probe timeout before the
# child is killed.
SPAWN_GRACE_SECONDS = 0.25

# ping's -p accepts at most 16 pattern bytes
MAX_PATTERN_BYTES = 16

_RTT_PATTERN = re.compile(r"time\s*[=<]\s*([\d.]+)\s*ms", re.IGNORECASE)

# Checked in order against the lower-cased output
_STATUS_MARKERS: tuple[tuple[str, EchoStatus], ...] = (
    ("destination host unreachable", EchoStatus.DESTINATION_HOST_UNREACHABLE),
    ("destination net unreachable", EchoStatus.DESTINATION_NET_UNREACHABLE),
    ("destination net/host unreachable", EchoStatus.DESTINATION_NET_UNREACHABLE),
    ("frag needed", EchoStatus.PACKET_TOO_BIG),
    ("message too long", EchoStatus.PACKET_TOO_BIG),
    ("needs to be fragmented", EchoStatus.PACKET_TOO_BIG),
    ("time to live exceeded", EchoStatus.TTL_EXPIRED),
    ("ttl expired", EchoStatus.TTL_EXPIRED),
    ("request timed out", EchoStatus.TIMED_OUT),
)


class SystemPingTransport(EchoTransportPort):
    """Sends echo requests with the system ping command."""

    def __init__(self, ping_binary: str = "ping", platform: str | None = None):
        """Initialize system ping transport.

        Args:
            ping_binary: Name or path of the ping executable.
            platform: sys.platform style identifier used to pick the
                command-line dialect. Defaults to the running platform.
        """
        self.ping_binary = ping_binary
        self.platform = platform or sys.platform

    def build_command(
        self,
        address: str,
        timeout_ms: int,
        payload: bytes,
        dont_fragment: bool = True,
    ) -> list[str]:
        """Build the argv for a single echo request."""
        size = str(len(payload))

        if self.platform.startswith("win"):
            cmd = [self.ping_binary, "-n", "1", "-w", str(timeout_ms), "-l", size]
            if dont_fragment:
                cmd.append("-f")
            cmd.append(address)
            return cmd

        pattern = payload[:MAX_PATTERN_BYTES].hex()

        if self.platform == "darwin":
            # macOS takes the wait time in milliseconds
            cmd = [self.ping_binary, "-n", "-c", "1", "-W", str(timeout_ms)]
            if dont_fragment:
                cmd.append("-D")
        else:
            # iputils takes whole seconds; the caller enforces the exact limit
            wait_seconds = max(1, math.ceil(timeout_ms / 1000))
            cmd = [self.ping_binary, "-n", "-c", "1", "-W", str(wait_seconds)]
            if dont_fragment:
                cmd.extend(["-M", "do"])

        cmd.extend(["-s", size, "-p", pattern, address])
        return cmd

    @staticmethod
    def parse_output(returncode: int, output: str) -> EchoReply:
        """Interpret ping's exit status and combined output.

        Raises:
            EchoError: If ping failed before an echo could be exchanged
                (unknown host, bad arguments, permission problems).
        """
        match = _RTT_PATTERN.search(output)
        if match:
            return EchoReply(
                status=EchoStatus.SUCCESS, round_trip_ms=float(match.group(1))
            )

        lowered = output.lower()
        for marker, status in _STATUS_MARKERS:
            if marker in lowered:
                return EchoReply(status=status)

        if returncode == 1:
            # Exit status 1 is "no reply received"
            return EchoReply(status=EchoStatus.TIMED_OUT)

        lines = [line.strip() for line in output.splitlines() if line.strip()]
        detail = lines[-1] if lines else f"ping exited with status {returncode}"
        raise EchoError(detail)

    async def echo(
        self,
        address: str,
        timeout_ms: int,
        payload: bytes,
        dont_fragment: bool = True,
    ) -> EchoReply:
        """Run ping once against address."""
        cmd = self.build_command(address, timeout_ms, payload, dont_fragment)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise EchoError(f"ping binary not found: {self.ping_binary}") from e

        try:
            stdout, _ = await asyncio.wait_for(
                proc.communicate(),
                timeout=timeout_ms / 1000 + SPAWN_GRACE_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.debug(f"ping to {address} exceeded {timeout_ms}ms, killing it")
            return EchoReply(status=EchoStatus.TIMED_OUT)
        finally:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()

        output = stdout.decode("utf-8", errors="replace")
        reply = self.parse_output(proc.returncode, output)

        # ping's own wait is coarser than timeout_ms on some platforms
        if reply.succeeded and reply.round_trip_ms > timeout_ms:
            logger.debug(
                f"Reply from {address} after {reply.round_trip_ms}ms exceeds {timeout_ms}ms"
            )
            return EchoReply(status=EchoStatus.TIMED_OUT)
        return reply
