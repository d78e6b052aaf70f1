"""
Retry Orchestrator - Exponential Backoff with Jitter.

Provides:
    - Retry of a fallible operation up to max_retries additional times
    - Exponential backoff capped at max_delay_ms, with bounded jitter
    - Short-circuit for non-retryable kinds and non-recoverable errors
    - A full attempt record for observability

Design Notes:
    - Waits are asyncio suspensions, never thread sleeps
    - Delays are integer milliseconds, truncated after jitter
    - Cancellation is never retried
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Awaitable, Callable, Generic, List, Optional, Tuple, TypeVar

from snippet_resilience.config.models import RetryConfig
from snippet_resilience.domain.errors import (
    ErrorKind,
    ErrorSeverity,
    SnippetLibraryError,
    normalize_error,
)
from snippet_resilience.domain.value_objects import ErrorContext
from snippet_resilience.observability.event_log import EventLog
from snippet_resilience.resilience.awaitables import Operation, resolve

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryAttempt:
    """Record of a single attempt."""

    attempt_number: int  # 1-based
    delay_ms: int = 0  # wait scheduled after this attempt failed
    error: Optional[SnippetLibraryError] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Outcome of execute_with_retry."""

    success: bool
    result: Optional[T] = None
    error: Optional[SnippetLibraryError] = None
    attempts: Tuple[RetryAttempt, ...] = ()
    total_duration_ms: int = 0

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)


def is_retryable(error: SnippetLibraryError, config: RetryConfig) -> bool:
    """Check if an error may be retried under the given configuration."""
    return error.kind in config.retryable_kinds and error.recoverable


def _cancelled_error(operation_name: str, cause: BaseException) -> SnippetLibraryError:
    return SnippetLibraryError(
        f"{operation_name} was cancelled",
        ErrorKind.SNIPPET_OPERATION,
        ErrorSeverity.MEDIUM,
        code="OPERATION_CANCELLED",
        recoverable=False,
        cause=cause,
    )


class RetryOrchestrator:
    """
    Executes fallible operations with automatic retry.

    Every attempt is recorded in the event log; the returned RetryResult
    carries the ordered attempt history.
    """

    def __init__(
        self,
        event_log: EventLog,
        config: Optional[RetryConfig] = None,
        *,
        sleep: Optional[SleepFunc] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize retry orchestrator.

        Args:
            event_log: Log receiving attempt records
            config: Default retry configuration
            sleep: Awaitable sleep taking seconds (default: asyncio.sleep)
            rng: Random source for jitter
        """
        self.event_log = event_log
        self.config = config or RetryConfig()
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    async def execute_with_retry(
        self,
        operation: Operation[T],
        operation_name: str = "operation",
        config: Optional[RetryConfig] = None,
    ) -> RetryResult[T]:
        """
        Execute an operation, retrying transient failures.

        Args:
            operation: Zero-argument callable, sync or async
            operation_name: Name for logging
            config: Retry configuration (default: orchestrator config)

        Returns:
            RetryResult with the value on success or the final error

        Raises:
            asyncio.CancelledError: If the operation or a wait is cancelled
        """
        config = config or self.config
        context = ErrorContext(component="RetryOrchestrator", operation=operation_name)
        attempts: List[RetryAttempt] = []
        started = time.monotonic()

        def finish(
            success: bool,
            result: Optional[T] = None,
            error: Optional[SnippetLibraryError] = None,
        ) -> RetryResult[T]:
            return RetryResult(
                success=success,
                result=result,
                error=error,
                attempts=tuple(attempts),
                total_duration_ms=int((time.monotonic() - started) * 1000),
            )

        for attempt in range(config.max_retries + 1):
            attempt_started = datetime.now(timezone.utc)
            self.event_log.log_debug(
                f"Executing {operation_name}, attempt {attempt + 1}"
            )

            try:
                result = await resolve(operation())
            except asyncio.CancelledError as e:
                error = _cancelled_error(operation_name, e)
                attempts.append(
                    RetryAttempt(attempt + 1, 0, error, attempt_started)
                )
                self.event_log.log_error(error, context)
                raise
            except Exception as e:
                error = normalize_error(e)
            else:
                attempts.append(RetryAttempt(attempt + 1, 0, None, attempt_started))
                self.event_log.log_info(
                    f"{operation_name} succeeded on attempt {attempt + 1}"
                )
                return finish(True, result=result)

            attempts.append(RetryAttempt(attempt + 1, 0, error, attempt_started))
            self.event_log.log_error(error, context)

            if not is_retryable(error, config):
                self.event_log.log_warning(
                    f"{operation_name} failed with non-retryable error: {error.message}"
                )
                return finish(False, error=error)

            if attempt >= config.max_retries:
                self.event_log.log_error(
                    SnippetLibraryError.snippet_operation(
                        f"{operation_name} failed after {config.max_retries + 1} attempts",
                        {"final_error": error.to_dict(), "attempts": len(attempts)},
                    )
                )
                return finish(False, error=error)

            delay = self.calculate_delay(attempt, config)
            attempts[-1] = replace(attempts[-1], delay_ms=delay)
            self.event_log.log_warning(
                f"{operation_name} failed on attempt {attempt + 1}, "
                f"retrying in {delay}ms"
            )
            try:
                await self._sleep(delay / 1000)
            except asyncio.CancelledError as e:
                self.event_log.log_error(_cancelled_error(operation_name, e), context)
                raise

        # range() always ends in one of the returns above
        raise RuntimeError(f"{operation_name}: retry loop ended without a result")

    def calculate_delay(self, attempt: int, config: Optional[RetryConfig] = None) -> int:
        """
        Calculate the wait after a failed attempt.

        Args:
            attempt: 0-based index of the attempt that just failed
            config: Retry configuration (default: orchestrator config)

        Returns:
            Delay in whole milliseconds, never negative
        """
        config = config or self.config
        delay: float = config.initial_delay_ms
        if config.exponential_backoff:
            delay = min(config.initial_delay_ms * (2 ** attempt), config.max_delay_ms)

        if config.jitter and config.jitter_ratio > 0:
            delay *= 1 + self._rng.uniform(-config.jitter_ratio, config.jitter_ratio)

        return max(0, int(delay))
