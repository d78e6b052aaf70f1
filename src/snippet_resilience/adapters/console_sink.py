"""
Console Log Sink.

Renders event log entries to the console through structlog.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, TextIO

import structlog

from snippet_resilience.domain.value_objects import LogEntry, LogLevel

_LOG_METHODS: Dict[LogLevel, str] = {
    LogLevel.DEBUG: "debug",
    LogLevel.INFO: "info",
    LogLevel.WARN: "warning",
    LogLevel.ERROR: "error",
    LogLevel.FATAL: "critical",
}


class ConsoleLogSink:
    """Structured console output for recorded entries."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        use_json: bool = False,
    ) -> None:
        """
        Initialize console sink.

        Args:
            stream: Output stream (default: stdout)
            use_json: Render JSON lines instead of key=value console output
        """
        processors: list = [structlog.processors.add_log_level]
        if use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        # Level filtering already happened in the event log
        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(file=stream),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
        )

    def emit(self, entry: LogEntry) -> None:
        """Render a single entry at the matching console level."""
        fields: Dict[str, Any] = {"timestamp": entry.timestamp.isoformat()}
        if entry.context is not None:
            fields["context"] = entry.context.to_dict()
        if entry.error is not None:
            fields["error_code"] = entry.error.code
            fields["error_kind"] = entry.error.kind.value
            fields["severity"] = entry.error.severity.value
            if entry.level >= LogLevel.ERROR and entry.error.stack:
                fields["stack"] = entry.error.stack
        if entry.metadata:
            fields["metadata"] = entry.metadata

        log_method = getattr(self._logger, _LOG_METHODS[entry.level])
        log_method(entry.message, **fields)

    def close(self) -> None:
        """Nothing to release."""
