"""Stdout incident adapter.

Implements IncidentSinkPort by echoing incident records to the
operator's terminal, byte for byte as they are written to the log.
"""

import asyncio
import logging

from netmonitor.core.ports import IncidentSinkPort

logger = logging.getLogger(__name__)


class StdoutIncidentSink(IncidentSinkPort):
    """Prints incident records to stdout."""

    async def write(self, record: str) -> None:
        """Print an incident record exactly as formatted."""
        await asyncio.to_thread(print, record, end="", flush=True)
