"""
Resilience Package - Retry, Recovery and Coordinated Error Handling.

This package provides resilience patterns for the snippet library:
    - RetryOrchestrator: Retry with exponential backoff and jitter
    - RecoveryRegistry: Prioritized automatic and manual remediation
    - ResilienceCoordinator: Facade combining logging, recovery and retry

Design Principles:
    - Fail fast for non-retryable and non-recoverable errors
    - Retry with backoff for transient errors
    - Try automatic remediation before surfacing a failure
    - Never swallow the original error
"""

from snippet_resilience.resilience.coordinator import (
    ErrorStats,
    HandlingResult,
    ResilienceCoordinator,
    create_coordinator,
)
from snippet_resilience.resilience.recovery import (
    ActionOutcome,
    RecoveryAction,
    RecoveryRegistry,
    RecoveryResult,
    RecoveryStrategy,
    default_strategies,
)
from snippet_resilience.resilience.retry import (
    RetryAttempt,
    RetryOrchestrator,
    RetryResult,
)

__all__ = [
    "ErrorStats",
    "HandlingResult",
    "ResilienceCoordinator",
    "create_coordinator",
    "ActionOutcome",
    "RecoveryAction",
    "RecoveryRegistry",
    "RecoveryResult",
    "RecoveryStrategy",
    "default_strategies",
    "RetryAttempt",
    "RetryOrchestrator",
    "RetryResult",
]
