"""
JSON Lines File Sink.

Appends one JSON object per recorded entry to a file. Writes run on a
single background worker so the caller never waits on disk I/O; write
failures are reported on the fallback logger and never propagate.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Union

from snippet_resilience.domain.value_objects import LogEntry

logger = logging.getLogger(__name__)


class JsonLinesFileSink:
    """Non-blocking append-only file sink."""

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Initialize file sink.

        Args:
            path: File to append entries to (created on first write)
        """
        self.path = Path(path)
        # One worker keeps lines in emit order
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="snippet-resilience-log",
        )
        self._closed = False

    def emit(self, entry: LogEntry) -> None:
        """Queue an entry for writing."""
        line = json.dumps(entry.to_dict(), default=str) + "\n"
        try:
            future = self._executor.submit(self._write, line)
        except RuntimeError as e:
            # Executor already shut down
            logger.error(f"Failed to write to log file {self.path}: {e}")
            return
        future.add_done_callback(self._report_failure)

    def _write(self, line: str) -> None:
        """Append a single line (runs on the worker thread)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)

    def _report_failure(self, future: Future) -> None:
        """Report a failed write on the fallback logger."""
        error = future.exception()
        if error is not None:
            logger.error(f"Failed to write to log file {self.path}: {error}")

    def flush(self) -> None:
        """Block until all queued writes have completed."""
        if self._closed:
            return
        self._executor.submit(lambda: None).result()

    def close(self) -> None:
        """Finish queued writes and stop the worker."""
        if not self._closed:
            self._closed = True
            self._executor.shutdown(wait=True)
