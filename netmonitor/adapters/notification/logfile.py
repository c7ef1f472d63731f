"""Append-only log file incident adapter.

Implements IncidentSinkPort by appending incident records to a single
UTF-8 text file. The file is only created when the first incident is
written, so a monitor that never starts leaves no trace on disk.
"""

import asyncio
import logging
from pathlib import Path

from netmonitor.core.ports import IncidentSinkPort

logger = logging.getLogger(__name__)


class LogFileIncidentSink(IncidentSinkPort):
    """Appends incident records to a text file."""

    def __init__(self, output_path: str):
        """Initialize log file incident adapter.

        Args:
            output_path: File to append incidents to. Missing parent
                directories are created on first write.

        Raises:
            ValueError: If output_path is empty or names a directory.
        """
        if not output_path or not output_path.strip():
            raise ValueError("output_path must be a non-empty string")

        self.path = Path(output_path).expanduser()
        if self.path.is_dir():
            raise ValueError(f"output_path is a directory: {output_path}")

        self._lock = asyncio.Lock()

    def _append(self, record: str) -> None:
        """Synchronous append; runs in a worker thread."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(record)

    async def write(self, record: str) -> None:
        """Append an incident record to the log file.

        Raises:
            OSError: If the file cannot be opened or written.
        """
        async with self._lock:
            try:
                await asyncio.to_thread(self._append, record)
            except OSError as e:
                logger.error(
                    f"Failed to append incident to {self.path}: {e}",
                    extra={"path": str(self.path)},
                )
                raise
