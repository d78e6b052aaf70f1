"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for
the pluggable parts of the resilience core. High-level modules depend on
these abstractions, not on concrete implementations.

Protocols:
    - LogSink: Output target for recorded event log entries

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
"""

from snippet_resilience.interfaces.log_sink import LogSink

__all__ = ["LogSink"]
