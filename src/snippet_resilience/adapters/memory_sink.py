"""
In-Memory Log Sink.

Collects emitted entries in a list. Useful for tests and for
collaborators that forward entries to a notification layer.
"""

from __future__ import annotations

import threading
from typing import List

from snippet_resilience.domain.value_objects import LogEntry


class InMemoryLogSink:
    """Thread-safe list of emitted entries."""

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()

    def emit(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> List[LogEntry]:
        """Snapshot of emitted entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def close(self) -> None:
        pass
