"""
Recovery Registry - Prioritized Remediation Strategies per Error Kind.

This module holds, per error kind, the strategies a calling subsystem
registered to remediate failures. The registry only decides whether and
when an action runs; what the action does belongs to the caller.

Usage:
    registry = RecoveryRegistry(event_log)
    registry.register(RecoveryStrategy(
        kind=ErrorKind.STORAGE_ACCESS,
        auto_execute=True,
        priority=1,
        actions=[RecoveryAction("create_directory", "Create Storage Directory",
                                "Create the storage directory", create_dir,
                                automatic=True)],
    ))

    result = await registry.attempt_recovery(error)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Dict, List, Optional, Sequence, Tuple

from snippet_resilience.domain.errors import (
    ErrorKind,
    SnippetLibraryError,
    normalize_error,
)
from snippet_resilience.domain.value_objects import ErrorContext
from snippet_resilience.observability.event_log import EventLog
from snippet_resilience.resilience.awaitables import Operation, resolve

logger = logging.getLogger(__name__)

MANUAL_ACTION_REQUIRED = "Manual action required"
NO_AUTOMATIC_RECOVERY = "No automatic recovery actions available"


@dataclass(frozen=True)
class ActionOutcome:
    """What a remediation procedure reports back."""

    success: bool
    reason: Optional[str] = None
    error: Optional[SnippetLibraryError] = None

    @classmethod
    def ok(cls) -> ActionOutcome:
        return cls(success=True)

    @classmethod
    def failed(
        cls,
        reason: str,
        error: Optional[SnippetLibraryError] = None,
    ) -> ActionOutcome:
        return cls(success=False, reason=reason, error=error)


# Procedures return an ActionOutcome (None counts as success), sync or async
RecoveryProcedure = Operation[Optional[ActionOutcome]]


@dataclass(frozen=True)
class RecoveryAction:
    """A single remediation step."""

    id: str
    label: str
    description: str
    procedure: RecoveryProcedure = field(repr=False, compare=False)
    automatic: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "automatic": self.automatic,
        }


@dataclass(frozen=True)
class RecoveryStrategy:
    """Prioritized bundle of actions for one error kind."""

    kind: ErrorKind
    actions: Tuple[RecoveryAction, ...]
    auto_execute: bool = False
    priority: int = 0  # lower runs first

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ErrorKind(self.kind))
        object.__setattr__(self, "actions", tuple(self.actions))
        ids = [action.id for action in self.actions]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate recovery action ids: {duplicates}")

    @property
    def automatic_actions(self) -> Tuple[RecoveryAction, ...]:
        return tuple(action for action in self.actions if action.automatic)


@dataclass(frozen=True)
class RecoveryResult:
    """Outcome of a recovery attempt."""

    success: bool
    message: str
    action_executed: Optional[str] = None
    error: Optional[SnippetLibraryError] = None


class RecoveryRegistry:
    """
    Registry of recovery strategies keyed by error kind.

    Supports:
        - Stable priority ordering per kind
        - Automatic recovery scan (auto strategies, automatic actions)
        - Explicit execution of any action by id
        - User-facing message with manual options

    The per-kind strategy lists are copy-on-write tuples: readers take
    the current tuple and iterate it without holding the lock. The lock
    is never held while a procedure runs.
    """

    def __init__(self, event_log: EventLog) -> None:
        """
        Initialize empty registry.

        Args:
            event_log: Log receiving recovery events
        """
        self.event_log = event_log
        self._strategies: Dict[ErrorKind, Tuple[RecoveryStrategy, ...]] = {}
        self._lock = RLock()
        logger.debug("RecoveryRegistry initialized")

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, strategy: RecoveryStrategy) -> None:
        """
        Add a strategy for its error kind.

        Strategies of equal priority keep their registration order.
        """
        with self._lock:
            existing = self._strategies.get(strategy.kind, ())
            self._strategies[strategy.kind] = tuple(
                sorted((*existing, strategy), key=lambda s: s.priority)
            )
        logger.info(
            f"Registered recovery strategy for {strategy.kind.value} "
            f"(priority {strategy.priority}, {len(strategy.actions)} actions)"
        )

    def register_all(self, strategies: Sequence[RecoveryStrategy]) -> None:
        for strategy in strategies:
            self.register(strategy)

    def unregister_kind(self, kind: ErrorKind) -> bool:
        """
        Remove every strategy for a kind.

        Returns:
            True if strategies were removed, False if none were registered
        """
        with self._lock:
            removed = self._strategies.pop(ErrorKind(kind), None)
        return removed is not None

    def clear(self) -> None:
        """Remove all strategies."""
        with self._lock:
            self._strategies = {}

    def strategies_for(self, kind: ErrorKind) -> Tuple[RecoveryStrategy, ...]:
        """Get the strategies for a kind, in priority order."""
        with self._lock:
            return self._strategies.get(ErrorKind(kind), ())

    # =========================================================================
    # Queries
    # =========================================================================

    def actions_for(self, error: SnippetLibraryError) -> List[RecoveryAction]:
        """Get every action for the error's kind, in priority order."""
        return [
            action
            for strategy in self.strategies_for(error.kind)
            for action in strategy.actions
        ]

    def has_automatic_recovery(self, error: SnippetLibraryError) -> bool:
        """Check if an auto-executable strategy has an automatic action."""
        return any(
            strategy.auto_execute and strategy.automatic_actions
            for strategy in self.strategies_for(error.kind)
        )

    def has_manual_recovery(self, error: SnippetLibraryError) -> bool:
        """Check if any manual action exists for the error's kind."""
        return any(not action.automatic for action in self.actions_for(error))

    def user_message(self, error: SnippetLibraryError) -> str:
        """
        Build a user-facing message.

        Includes the suggested action and the manual recovery options,
        so a UI can render choices without knowing the taxonomy.
        """
        message = error.message

        if error.suggested_action:
            message += f"\n\nSuggested action: {error.suggested_action}"

        manual_actions = [a for a in self.actions_for(error) if not a.automatic]
        if manual_actions:
            message += "\n\nAvailable recovery options:"
            for action in manual_actions:
                message += f"\n• {action.label}: {action.description}"

        return message

    # =========================================================================
    # Execution
    # =========================================================================

    async def attempt_recovery(self, error: SnippetLibraryError) -> RecoveryResult:
        """
        Run the first automatic action that succeeds.

        Strategies are scanned in priority order, skipping those that are
        not auto-executable; within a strategy, manual actions are
        skipped. A failed action is logged and the scan continues.
        """
        self.event_log.log_info(
            f"Attempting recovery for error: {error.message}",
            ErrorContext(component="RecoveryRegistry", operation="attempt_recovery"),
        )

        for strategy in self.strategies_for(error.kind):
            if not strategy.auto_execute:
                continue

            for action in strategy.automatic_actions:
                self.event_log.log_debug(f"Executing recovery action: {action.id}")
                outcome = await self._invoke(action)

                if outcome.success:
                    self.event_log.log_info(
                        f"Recovery action {action.id} completed successfully"
                    )
                    return RecoveryResult(
                        success=True,
                        action_executed=action.id,
                        message=f"Recovery successful: {action.description}",
                    )

                self.event_log.log_warning(
                    f"Recovery action {action.id} failed: {outcome.reason}"
                )

        return RecoveryResult(success=False, message=NO_AUTOMATIC_RECOVERY)

    async def execute_action(
        self,
        error: SnippetLibraryError,
        action_id: str,
    ) -> RecoveryResult:
        """
        Run one action by id, manual or automatic. Never retries.

        Returns:
            RecoveryResult; a missing id is a failure, not an exception
        """
        action = next((a for a in self.actions_for(error) if a.id == action_id), None)
        if action is None:
            return RecoveryResult(
                success=False,
                message=f"Recovery action {action_id} not found",
            )

        self.event_log.log_info(f"Executing recovery action: {action.id}")
        outcome = await self._invoke(action)

        if outcome.success:
            self.event_log.log_info(
                f"Recovery action {action.id} completed successfully"
            )
            return RecoveryResult(
                success=True,
                action_executed=action.id,
                message=f"Recovery successful: {action.description}",
            )

        failure = outcome.error or SnippetLibraryError.snippet_operation(
            f"Recovery action failed: {outcome.reason}",
            {"action_id": action.id},
        )
        self.event_log.log_error(failure)
        return RecoveryResult(
            success=False,
            action_executed=action.id,
            error=failure,
            message=f"Recovery failed: {failure.message}",
        )

    async def _invoke(self, action: RecoveryAction) -> ActionOutcome:
        """Run a procedure and turn whatever it does into an outcome."""
        try:
            outcome = await resolve(action.procedure())
        except Exception as e:
            return ActionOutcome.failed(str(e) or type(e).__name__, normalize_error(e))

        if outcome is None:
            return ActionOutcome.ok()
        if not isinstance(outcome, ActionOutcome):
            return ActionOutcome.failed(
                f"Recovery action {action.id} returned {type(outcome).__name__}, "
                "expected ActionOutcome"
            )
        return outcome


# =============================================================================
# Built-in strategies
# =============================================================================


def _manual_action_required() -> ActionOutcome:
    return ActionOutcome.failed(MANUAL_ACTION_REQUIRED)


def _placeholder(
    action_id: str,
    label: str,
    description: str,
    automatic: bool,
) -> RecoveryAction:
    return RecoveryAction(
        id=action_id,
        label=label,
        description=description,
        procedure=_manual_action_required,
        automatic=automatic,
    )


def default_strategies() -> List[RecoveryStrategy]:
    """
    Built-in strategies whose actions report that manual action is required.

    The owning subsystems (storage, sync, import/export) register real
    procedures on top of these.
    """
    return [
        RecoveryStrategy(
            kind=ErrorKind.STORAGE_ACCESS,
            auto_execute=False,
            priority=1,
            actions=(
                _placeholder(
                    "check_permissions",
                    "Check File Permissions",
                    "Verify that the application has read/write access to the "
                    "storage location",
                    automatic=False,
                ),
                _placeholder(
                    "create_directory",
                    "Create Storage Directory",
                    "Create the storage directory if it doesn't exist",
                    automatic=True,
                ),
                _placeholder(
                    "use_fallback_storage",
                    "Use Fallback Storage",
                    "Switch to an alternative storage location",
                    automatic=True,
                ),
            ),
        ),
        RecoveryStrategy(
            kind=ErrorKind.NETWORK,
            auto_execute=True,
            priority=1,
            actions=(
                _placeholder(
                    "retry_connection",
                    "Retry Connection",
                    "Attempt to reconnect to the server",
                    automatic=True,
                ),
                _placeholder(
                    "check_server_status",
                    "Check Server Status",
                    "Verify that the web GUI server is running",
                    automatic=False,
                ),
            ),
        ),
        RecoveryStrategy(
            kind=ErrorKind.SYNC_CONFLICT,
            auto_execute=False,
            priority=1,
            actions=(
                _placeholder(
                    "resolve_conflicts",
                    "Resolve Conflicts",
                    "Manually resolve synchronization conflicts",
                    automatic=False,
                ),
                _placeholder(
                    "force_sync",
                    "Force Synchronization",
                    "Force synchronization, potentially overwriting conflicting "
                    "changes",
                    automatic=False,
                ),
            ),
        ),
        RecoveryStrategy(
            kind=ErrorKind.VALIDATION,
            auto_execute=False,
            priority=1,
            actions=(
                _placeholder(
                    "fix_validation_errors",
                    "Fix Validation Errors",
                    "Correct the validation errors in the input data",
                    automatic=False,
                ),
                _placeholder(
                    "use_default_values",
                    "Use Default Values",
                    "Replace invalid values with sensible defaults",
                    automatic=True,
                ),
            ),
        ),
        RecoveryStrategy(
            kind=ErrorKind.IMPORT_EXPORT,
            auto_execute=False,
            priority=1,
            actions=(
                _placeholder(
                    "check_file_format",
                    "Check File Format",
                    "Verify that the file is in the correct format",
                    automatic=False,
                ),
                _placeholder(
                    "try_different_format",
                    "Try Different Format",
                    "Attempt to import using a different file format",
                    automatic=True,
                ),
            ),
        ),
    ]
