"""
Log Sink Protocol.

Defines the abstract interface for event log output. The event log
keeps its own bounded in-memory record and hands every recorded entry
to each configured sink.

The sink is responsible for:
    - Rendering or persisting a ready-made LogEntry
    - Never blocking the caller for slow I/O
    - Releasing its resources on close()

Design Notes:
    - emit() is called outside the event log's lock
    - A sink that raises is reported on the fallback logger and skipped
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from snippet_resilience.domain.value_objects import LogEntry


@runtime_checkable
class LogSink(Protocol):
    """Abstract interface for event log output."""

    def emit(self, entry: LogEntry) -> None:
        """
        Write a single log entry.

        Args:
            entry: The entry just recorded by the event log
        """
        ...

    def close(self) -> None:
        """Flush pending writes and release resources."""
        ...
