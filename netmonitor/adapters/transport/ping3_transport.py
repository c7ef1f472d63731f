"""ping3 echo transport.

Implements EchoTransportPort with the ping3 library, which opens its
own ICMP socket per call. ping3 is synchronous, so each echo runs in a
worker thread.

ping3 builds its own payload and cannot set the don't-fragment flag;
only the payload length is honoured.
"""

import asyncio
import itertools
import logging

import ping3
from ping3 import errors as ping3_errors

from netmonitor.core.errors import EchoError
from netmonitor.core.models import EchoReply, EchoStatus
from netmonitor.core.ports import EchoTransportPort

logger = logging.getLogger(__name__)

# ICMP sequence numbers are 16 bits
_MAX_SEQ = 0xFFFF


class Ping3Transport(EchoTransportPort):
    """Sends echo requests through ping3 in a worker thread."""

    def __init__(self, dont_fragment: bool = True):
        """Initialize ping3 transport.

        Args:
            dont_fragment: Requested DF setting. ping3 cannot honour it,
                so requesting it only produces a warning.
        """
        # Make ping3 raise typed errors instead of returning None/False
        ping3.EXCEPTIONS = True
        self._seq = itertools.count()
        if dont_fragment:
            logger.warning(
                "ping3 backend cannot set the don't-fragment flag; "
                "probes will be sent without it"
            )

    def _next_seq(self) -> int:
        return next(self._seq) % _MAX_SEQ

    async def echo(
        self,
        address: str,
        timeout_ms: int,
        payload: bytes,
        dont_fragment: bool = True,
    ) -> EchoReply:
        """Ping address once with ping3."""
        try:
            delay = await asyncio.to_thread(
                ping3.ping,
                address,
                timeout=timeout_ms / 1000,
                unit="ms",
                seq=self._next_seq(),
                size=len(payload),
            )
        except ping3_errors.Timeout:
            return EchoReply(status=EchoStatus.TIMED_OUT)
        except ping3_errors.DestinationHostUnreachable:
            return EchoReply(status=EchoStatus.DESTINATION_HOST_UNREACHABLE)
        except ping3_errors.DestinationUnreachable:
            return EchoReply(status=EchoStatus.DESTINATION_NET_UNREACHABLE)
        except ping3_errors.TimeToLiveExpired:
            return EchoReply(status=EchoStatus.TTL_EXPIRED)
        except ping3_errors.HostUnknown as e:
            raise EchoError(f"Cannot resolve {address}: {e}") from e

        # Without EXCEPTIONS ping3 signals failure with None or False
        if delay is None:
            return EchoReply(status=EchoStatus.TIMED_OUT)
        if delay is False:
            return EchoReply(status=EchoStatus.UNKNOWN)

        return EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=float(delay))
