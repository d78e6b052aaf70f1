"""
Event Log - Bounded, Level-Filtered Record of Events and Errors.

Provides:
    - Append with level threshold and FIFO eviction
    - Severity-derived level for typed errors
    - Snapshot read views (by level, most recent, errors only)
    - JSON export

Design Notes:
    - One lock guards the buffer; readers copy under it
    - Sinks are called after the lock is released
    - A failing sink is reported on the fallback logger, never raised
"""

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional

from snippet_resilience.config.models import EventLogConfig
from snippet_resilience.domain.errors import SnippetLibraryError
from snippet_resilience.domain.value_objects import (
    ErrorContext,
    LogEntry,
    LogLevel,
    level_for_severity,
)
from snippet_resilience.interfaces.log_sink import LogSink

# Fallback channel for sink failures
logger = logging.getLogger(__name__)


class EventLog:
    """
    Append-only, capacity-bounded log of events.

    Features:
        - Minimum level filtering
        - Oldest-first eviction beyond max_entries
        - Pluggable sinks (console, file, in-memory)
        - Safe under concurrent append and read
    """

    def __init__(
        self,
        config: Optional[EventLogConfig] = None,
        sinks: Optional[Iterable[LogSink]] = None,
    ) -> None:
        """
        Initialize event log.

        Args:
            config: Level threshold and capacity (default: EventLogConfig())
            sinks: Output targets receiving every recorded entry
        """
        self._config = config or EventLogConfig()
        self._sinks: List[LogSink] = list(sinks or [])
        self._entries: Deque[LogEntry] = deque(maxlen=self._config.max_entries)
        self._lock = threading.Lock()

    @property
    def config(self) -> EventLogConfig:
        return self._config

    @property
    def sinks(self) -> List[LogSink]:
        return list(self._sinks)

    def add_sink(self, sink: LogSink) -> None:
        """Attach an additional output target."""
        with self._lock:
            self._sinks = [*self._sinks, sink]

    # =========================================================================
    # Writing
    # =========================================================================

    def append(
        self,
        level: LogLevel,
        message: str,
        error: Optional[SnippetLibraryError] = None,
        context: Optional[ErrorContext] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[LogEntry]:
        """
        Record an entry.

        Args:
            level: Entry level
            message: Human-readable message
            error: Optional typed error
            context: Optional failure context
            metadata: Optional additional data

        Returns:
            The recorded entry, or None if below the minimum level
        """
        level = LogLevel(level)
        with self._lock:
            if level < self._config.min_level:
                return None
            entry = LogEntry(
                level=level,
                message=message,
                error=error,
                context=context,
                metadata=dict(metadata) if metadata else None,
            )
            # deque(maxlen) drops the oldest entry on overflow
            self._entries.append(entry)
            sinks = self._sinks

        self._emit(sinks, entry)
        return entry

    def _emit(self, sinks: List[LogSink], entry: LogEntry) -> None:
        """Hand an entry to every sink."""
        for sink in sinks:
            try:
                sink.emit(entry)
            except Exception as e:
                logger.error(
                    f"Log sink {type(sink).__name__} failed: {e}",
                    exc_info=True,
                )

    def log_error(
        self,
        error: SnippetLibraryError,
        context: Optional[ErrorContext] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[LogEntry]:
        """Record a typed error at the level derived from its severity."""
        level = level_for_severity(error.severity)
        return self.append(level, error.message, error, context, metadata)

    def log_warning(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[LogEntry]:
        return self.append(LogLevel.WARN, message, None, context, metadata)

    def log_info(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[LogEntry]:
        return self.append(LogLevel.INFO, message, None, context, metadata)

    def log_debug(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[LogEntry]:
        return self.append(LogLevel.DEBUG, message, None, context, metadata)

    # =========================================================================
    # Reading
    # =========================================================================

    def query(self, level: Optional[LogLevel] = None) -> List[LogEntry]:
        """
        Get entries, optionally only those at exactly one level.

        Args:
            level: Level to select (None = all entries)

        Returns:
            Entries oldest first
        """
        with self._lock:
            snapshot = list(self._entries)
        if level is None:
            return snapshot
        level = LogLevel(level)
        return [entry for entry in snapshot if entry.level == level]

    def recent(self, count: int = 100) -> List[LogEntry]:
        """Get the most recent entries, oldest first."""
        if count <= 0:
            return []
        with self._lock:
            snapshot = list(self._entries)
        return snapshot[-count:]

    def errors_only(self) -> List[LogEntry]:
        """Get entries that carry a typed error."""
        with self._lock:
            snapshot = list(self._entries)
        return [entry for entry in snapshot if entry.error is not None]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def export(self) -> str:
        """Serialize the whole log as a JSON array."""
        entries = self.query()
        return json.dumps(
            [entry.to_dict() for entry in entries],
            indent=2,
            default=str,
        )

    # =========================================================================
    # Configuration
    # =========================================================================

    def update_config(self, **changes: Any) -> EventLogConfig:
        """
        Replace configuration fields.

        Shrinking max_entries keeps the newest entries.

        Args:
            **changes: EventLogConfig fields to replace

        Returns:
            The new, validated configuration
        """
        new_config = self._config.with_overrides(**changes)
        with self._lock:
            if new_config.max_entries != self._config.max_entries:
                self._entries = deque(self._entries, maxlen=new_config.max_entries)
            self._config = new_config
        return new_config

    def close(self) -> None:
        """Close all sinks."""
        with self._lock:
            sinks = self._sinks
        for sink in sinks:
            try:
                sink.close()
            except Exception as e:
                logger.error(f"Closing log sink {type(sink).__name__} failed: {e}")
