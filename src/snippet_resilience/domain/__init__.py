"""
Domain Layer - Error Taxonomy and Value Objects.

This package contains the typed error model every other component of
the resilience core operates on. Everything here is pure Python with no
infrastructure dependencies (except Pydantic for validation).

Error Taxonomy:
    - ErrorKind: Closed enumeration of failure categories
    - ErrorSeverity: low / medium / high / critical
    - SnippetLibraryError: Immutable typed error value
    - normalize_error: Converts arbitrary failures into typed errors

Value Objects:
    - LogLevel: Ordered event log levels
    - LogEntry: A recorded event
    - ErrorContext: Where a failure happened

Design Principles:
    - Immutable values (read-only properties, frozen models)
    - Normalize once, at the boundary
"""

from snippet_resilience.domain.errors import (
    DEFAULT_SEVERITY,
    ErrorKind,
    ErrorSeverity,
    SnippetLibraryError,
    normalize_error,
)
from snippet_resilience.domain.value_objects import (
    ErrorContext,
    LogEntry,
    LogLevel,
    level_for_severity,
)

__all__ = [
    "DEFAULT_SEVERITY",
    "ErrorKind",
    "ErrorSeverity",
    "SnippetLibraryError",
    "normalize_error",
    "ErrorContext",
    "LogEntry",
    "LogLevel",
    "level_for_severity",
]
