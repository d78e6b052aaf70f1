"""
Adapters Package - Log Sink Implementations.

This package contains concrete implementations of the LogSink protocol
defined in the interfaces package. Following the Hexagonal Architecture
(Ports & Adapters) pattern.

Sinks:
    - ConsoleLogSink: Structured console output via structlog
    - JsonLinesFileSink: Non-blocking append-only JSON lines file
    - InMemoryLogSink: Collected entries for tests and UI forwarding

Design Principles:
    - All adapters implement the LogSink protocol
    - Easily swappable via Dependency Injection
    - No resilience logic in adapters
"""

from snippet_resilience.adapters.console_sink import ConsoleLogSink
from snippet_resilience.adapters.file_sink import JsonLinesFileSink
from snippet_resilience.adapters.memory_sink import InMemoryLogSink

__all__ = [
    "ConsoleLogSink",
    "JsonLinesFileSink",
    "InMemoryLogSink",
]
