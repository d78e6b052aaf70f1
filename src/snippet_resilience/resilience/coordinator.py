"""
Resilience Coordinator - Facade over Logging, Recovery and Retry.

The coordinator is what surrounding subsystems (editor integration,
storage, web front end) call whenever an operation can fail. It
normalizes the failure, logs it, tries automatic recovery and, when
asked to, retries the raw operation first.

Lifecycle of handle_error():
    Received -> Normalized -> (Logged) -> (Recovering -> Recovered | RecoveryFailed)
    -> Reported

Design Notes:
    - Constructed explicitly and passed down; there is no global instance
    - Statistics are scanned from the event log on every call
    - Retry only ever reruns the raw operation, never the recovery path
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from snippet_resilience.adapters.console_sink import ConsoleLogSink
from snippet_resilience.adapters.file_sink import JsonLinesFileSink
from snippet_resilience.config.models import (
    HandlingOptions,
    ResilienceConfig,
    RetryConfig,
)
from snippet_resilience.domain.errors import SnippetLibraryError, normalize_error
from snippet_resilience.domain.value_objects import ErrorContext, LogEntry
from snippet_resilience.interfaces.log_sink import LogSink
from snippet_resilience.observability.event_log import EventLog
from snippet_resilience.resilience.awaitables import Operation, resolve
from snippet_resilience.resilience.recovery import (
    RecoveryAction,
    RecoveryRegistry,
    RecoveryResult,
    default_strategies,
)
from snippet_resilience.resilience.retry import (
    RetryOrchestrator,
    RetryResult,
    SleepFunc,
)

T = TypeVar("T")

RECENT_ERROR_COUNT = 10


@dataclass(frozen=True)
class HandlingResult(Generic[T]):
    """What a collaborator receives back from the coordinator."""

    success: bool
    result: Optional[T] = None
    error: Optional[SnippetLibraryError] = None
    recovery_attempted: bool = False
    recovery_result: Optional[RecoveryResult] = None
    retry_result: Optional[RetryResult[T]] = None


@dataclass(frozen=True)
class ErrorStats:
    """Error statistics derived from the event log."""

    total: int = 0
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_kind: Dict[str, int] = field(default_factory=dict)
    recent: Tuple[LogEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "by_severity": dict(self.by_severity),
            "by_kind": dict(self.by_kind),
            "recent": [entry.to_dict() for entry in self.recent],
        }


class ResilienceCoordinator:
    """
    Central error handling for the snippet library.

    Features:
        - Boundary normalization of arbitrary failures
        - Logging, automatic recovery and optional retry
        - Recovery options and messages for UI layers
        - Derived error statistics
    """

    def __init__(
        self,
        event_log: EventLog,
        recovery_registry: RecoveryRegistry,
        retry_orchestrator: RetryOrchestrator,
        default_options: Optional[HandlingOptions] = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            event_log: Shared event log
            recovery_registry: Registered recovery strategies
            retry_orchestrator: Retry executor (its config is the retry base)
            default_options: Options used when a call passes none
        """
        self.event_log = event_log
        self.recovery_registry = recovery_registry
        self.retry_orchestrator = retry_orchestrator
        self.default_options = default_options or HandlingOptions()

    # =========================================================================
    # Handling
    # =========================================================================

    async def handle_error(
        self,
        failure: Any,
        context: Optional[ErrorContext] = None,
        options: Optional[HandlingOptions] = None,
    ) -> HandlingResult[Any]:
        """
        Run a failure through logging and automatic recovery.

        Args:
            failure: Exception, typed error, string or any value
            context: Where the failure happened
            options: Handling options (default: coordinator defaults)

        Returns:
            Success if automatic recovery fixed it, else the typed error
        """
        options = options or self.default_options
        error = normalize_error(failure)

        if options.log_errors:
            self.event_log.log_error(error, context)

        recovery_attempted = False
        recovery_result: Optional[RecoveryResult] = None

        if options.auto_recover and self.recovery_registry.has_automatic_recovery(error):
            recovery_attempted = True
            recovery_result = await self.recovery_registry.attempt_recovery(error)

            if recovery_result.success:
                self.event_log.log_info(
                    f"Automatic recovery successful for error: {error.message}",
                    context,
                )
                return HandlingResult(
                    success=True,
                    recovery_attempted=True,
                    recovery_result=recovery_result,
                )

        return HandlingResult(
            success=False,
            error=error,
            recovery_attempted=recovery_attempted,
            recovery_result=recovery_result,
        )

    def handle_sync_error(
        self,
        failure: Any,
        context: Optional[ErrorContext] = None,
        options: Optional[HandlingOptions] = None,
    ) -> HandlingResult[Any]:
        """Normalize and log a failure from synchronous code. Never recovers."""
        options = options or self.default_options
        error = normalize_error(failure)

        if options.log_errors:
            self.event_log.log_error(error, context)

        return HandlingResult(success=False, error=error)

    async def execute_with_error_handling(
        self,
        operation: Operation[T],
        operation_name: str,
        context: Optional[ErrorContext] = None,
        options: Optional[HandlingOptions] = None,
    ) -> HandlingResult[T]:
        """
        Execute an operation with retry (optional), logging and recovery.

        Args:
            operation: Zero-argument callable, sync or async
            operation_name: Name for logging
            context: Where the operation runs
            options: Handling options; max_retries > 0 enables retry

        Returns:
            HandlingResult with the value, or the handled final error
        """
        options = options or self.default_options

        if options.max_retries > 0:
            retry_result = await self.retry_orchestrator.execute_with_retry(
                operation,
                operation_name,
                self.retry_config_for(options),
            )
            if retry_result.success:
                return HandlingResult(
                    success=True,
                    result=retry_result.result,
                    retry_result=retry_result,
                )

            handled = await self.handle_error(retry_result.error, context, options)
            return replace(handled, retry_result=retry_result)

        try:
            result = await resolve(operation())
        except Exception as e:
            return await self.handle_error(e, context, options)
        return HandlingResult(success=True, result=result)

    def retry_config_for(self, options: HandlingOptions) -> RetryConfig:
        """Build the retry configuration for a call from its options."""
        base = self.retry_orchestrator.config
        return base.with_overrides(
            max_retries=options.max_retries,
            initial_delay_ms=options.retry_delay_ms,
            exponential_backoff=options.exponential_backoff,
            retryable_kinds=(
                options.retryable_kinds
                if options.retryable_kinds is not None
                else base.retryable_kinds
            ),
        )

    # =========================================================================
    # Collaborator helpers
    # =========================================================================

    def create_context(
        self,
        component: str,
        operation: str,
        additional_data: Optional[Dict[str, Any]] = None,
        *,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> ErrorContext:
        """Create error context for an operation."""
        return ErrorContext(
            component=component,
            operation=operation,
            user_id=user_id,
            session_id=session_id,
            additional_data=additional_data,
        )

    def get_user_friendly_message(self, error: SnippetLibraryError) -> str:
        return self.recovery_registry.user_message(error)

    def get_recovery_actions(self, error: SnippetLibraryError) -> List[RecoveryAction]:
        return self.recovery_registry.actions_for(error)

    async def execute_recovery_action(
        self,
        error: SnippetLibraryError,
        action_id: str,
    ) -> RecoveryResult:
        return await self.recovery_registry.execute_action(error, action_id)

    def is_critical_error(self, error: SnippetLibraryError) -> bool:
        return error.is_critical

    def is_recoverable_error(self, error: SnippetLibraryError) -> bool:
        return error.recoverable

    def get_stats(self) -> ErrorStats:
        """Scan the event log's error entries into statistics."""
        error_entries = self.event_log.errors_only()
        by_severity: Counter = Counter()
        by_kind: Counter = Counter()

        for entry in error_entries:
            by_severity[entry.error.severity.value] += 1
            by_kind[entry.error.kind.value] += 1

        return ErrorStats(
            total=len(error_entries),
            by_severity=dict(by_severity),
            by_kind=dict(by_kind),
            recent=tuple(error_entries[-RECENT_ERROR_COUNT:]),
        )

    def close(self) -> None:
        """Release event log sinks."""
        self.event_log.close()


def create_coordinator(
    config: Optional[ResilienceConfig] = None,
    *,
    sinks: Optional[List[LogSink]] = None,
    sleep: Optional[SleepFunc] = None,
    rng: Optional[random.Random] = None,
) -> ResilienceCoordinator:
    """
    Wire a complete coordinator from configuration.

    Args:
        config: Root configuration (default: ResilienceConfig())
        sinks: Extra sinks in addition to the configured console/file sinks
        sleep: Awaitable sleep for retry waits (default: asyncio.sleep)
        rng: Random source for retry jitter

    Returns:
        Ready-to-use ResilienceCoordinator
    """
    config = config or ResilienceConfig()
    log_config = config.event_log

    all_sinks: List[LogSink] = []
    if log_config.console_enabled:
        all_sinks.append(ConsoleLogSink(use_json=log_config.console_json))
    if log_config.file_enabled and log_config.file_path is not None:
        all_sinks.append(JsonLinesFileSink(log_config.file_path))
    all_sinks.extend(sinks or [])

    event_log = EventLog(log_config, sinks=all_sinks)

    registry = RecoveryRegistry(event_log)
    if config.install_default_strategies:
        registry.register_all(default_strategies())

    orchestrator = RetryOrchestrator(event_log, config.retry, sleep=sleep, rng=rng)

    return ResilienceCoordinator(
        event_log,
        registry,
        orchestrator,
        default_options=config.handling,
    )
