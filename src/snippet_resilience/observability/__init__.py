"""
Observability Package - Bounded Event Log.

This package records what happened inside the resilience core:
    - EventLog: Level-filtered, capacity-bounded record of events
      and typed errors, fanned out to pluggable sinks

Design Principles:
    - Process-lifetime only (nothing is read back after restart)
    - Thread-safe appends and snapshot reads
    - Statistics are derived from the log, never stored beside it
"""

from snippet_resilience.observability.event_log import EventLog

__all__ = ["EventLog"]
