"""
Snippet Resilience - Error Handling Core of the Snippet Library.

Classifies failures, decides whether and how to retry an operation,
attempts automated remediation, and records a bounded history of what
happened. The editor integration, storage layer and web front end call
into this core whenever an operation can fail.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection, no global instances
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Error taxonomy (SnippetLibraryError) and value objects
    - observability: Bounded event log
    - resilience: Retry orchestrator, recovery registry, coordinator
    - adapters: Log sinks (console, file, in-memory)
    - config: Configuration models and loaders

Example:
    >>> from snippet_resilience import create_coordinator, HandlingOptions
    >>> coordinator = create_coordinator()
    >>> result = await coordinator.execute_with_error_handling(
    ...     fetch_snippets, "fetch_snippets", options=HandlingOptions(max_retries=2)
    ... )
    >>> if not result.success:
    ...     print(coordinator.get_user_friendly_message(result.error))

"""

import logging

__version__ = "0.1.0"

from snippet_resilience.config import (
    HandlingOptions,
    ResilienceConfig,
    RetryConfig,
    load_config,
)
from snippet_resilience.domain import (
    ErrorContext,
    ErrorKind,
    ErrorSeverity,
    LogLevel,
    SnippetLibraryError,
    normalize_error,
)
from snippet_resilience.observability import EventLog
from snippet_resilience.resilience import (
    ActionOutcome,
    RecoveryAction,
    RecoveryRegistry,
    RecoveryStrategy,
    ResilienceCoordinator,
    RetryOrchestrator,
    create_coordinator,
)


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure stdlib logging for Snippet Resilience.

    Call this at application startup to see the library's own
    diagnostics (registrations, sink failures). By default, only
    WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import snippet_resilience
        >>> snippet_resilience.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("snippet_resilience").setLevel(level)


__all__ = [
    "__version__",
    "configure_logging",
    "HandlingOptions",
    "ResilienceConfig",
    "RetryConfig",
    "load_config",
    "ErrorContext",
    "ErrorKind",
    "ErrorSeverity",
    "LogLevel",
    "SnippetLibraryError",
    "normalize_error",
    "EventLog",
    "ActionOutcome",
    "RecoveryAction",
    "RecoveryRegistry",
    "RecoveryStrategy",
    "ResilienceCoordinator",
    "RetryOrchestrator",
    "create_coordinator",
]
