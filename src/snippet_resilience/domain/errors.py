"""
Error Taxonomy - Typed Errors for the Snippet Library.

Every failure that enters the resilience core is converted exactly once
into a SnippetLibraryError. Downstream components (event log, retry,
recovery) only ever see these typed errors.

Provides:
    - ErrorKind: Closed set of failure categories
    - ErrorSeverity: Ordinal urgency of a failure
    - SnippetLibraryError: Immutable typed error value
    - normalize_error: Boundary conversion of arbitrary failures

Design Notes:
    - Fields are set once at construction and exposed read-only
    - Kind factories fix severity, code and suggested action
    - The wrapped cause is also chained as __cause__ for tracebacks
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorKind(str, Enum):
    """Category of failure, drives retry and recovery policy."""

    STORAGE_ACCESS = "storage_access"
    VALIDATION = "validation"
    SYNC_CONFLICT = "sync_conflict"
    NETWORK = "network"
    IMPORT_EXPORT = "import_export"
    SEARCH = "search"
    SNIPPET_OPERATION = "snippet_operation"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Urgency of a failure, drives the log level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


DEFAULT_SEVERITY: Mapping[ErrorKind, ErrorSeverity] = {
    ErrorKind.STORAGE_ACCESS: ErrorSeverity.HIGH,
    ErrorKind.VALIDATION: ErrorSeverity.MEDIUM,
    ErrorKind.SYNC_CONFLICT: ErrorSeverity.MEDIUM,
    ErrorKind.NETWORK: ErrorSeverity.MEDIUM,
    ErrorKind.IMPORT_EXPORT: ErrorSeverity.MEDIUM,
    ErrorKind.SEARCH: ErrorSeverity.LOW,
    ErrorKind.SNIPPET_OPERATION: ErrorSeverity.MEDIUM,
    ErrorKind.CONFIGURATION: ErrorSeverity.HIGH,
    ErrorKind.UNKNOWN: ErrorSeverity.MEDIUM,
}

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class SnippetLibraryError(Exception):
    """
    Typed error carrying kind, severity and recoverability metadata.

    Instances are values: every field is fixed at construction and only
    readable afterwards. Use the kind factories (storage_access, network,
    ...) at the point of failure, or normalize_error() at a boundary.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        *,
        code: Optional[str] = None,
        details: Any = None,
        recoverable: bool = True,
        suggested_action: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        """
        Initialize typed error.

        Args:
            message: Human-readable description
            kind: Failure category
            severity: Failure urgency (default: MEDIUM)
            code: Machine code (default: "<KIND>_ERROR")
            details: Opaque structured payload
            recoverable: Whether retry/recovery may help (default: True)
            suggested_action: Hint for the user
            context: Free-form key/value context
            cause: Wrapped underlying exception
        """
        super().__init__(message)
        kind = ErrorKind(kind)
        self._message = message
        self._kind = kind
        self._severity = ErrorSeverity(severity)
        self._code = code or f"{kind.value.upper()}_ERROR"
        self._details = details
        self._recoverable = recoverable
        self._suggested_action = suggested_action
        self._context = dict(context) if context else None
        self._cause = cause
        self._timestamp = datetime.now(timezone.utc)
        if cause is not None:
            self.__cause__ = cause

    # =========================================================================
    # Read-only fields
    # =========================================================================

    @property
    def message(self) -> str:
        return self._message

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def severity(self) -> ErrorSeverity:
        return self._severity

    @property
    def code(self) -> str:
        return self._code

    @property
    def details(self) -> Any:
        return self._details

    @property
    def recoverable(self) -> bool:
        return self._recoverable

    @property
    def suggested_action(self) -> Optional[str]:
        return self._suggested_action

    @property
    def context(self) -> Optional[Dict[str, Any]]:
        # Copy so callers cannot mutate the stored context
        return dict(self._context) if self._context is not None else None

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def is_critical(self) -> bool:
        """Check if the error requires immediate attention."""
        return self._severity is ErrorSeverity.CRITICAL

    @property
    def stack(self) -> Optional[str]:
        """Formatted traceback of this error, or of its cause if never raised."""
        source: Optional[BaseException] = None
        if self.__traceback__ is not None:
            source = self
        elif self._cause is not None and self._cause.__traceback__ is not None:
            source = self._cause
        if source is None:
            return None
        return "".join(
            traceback.format_exception(type(source), source, source.__traceback__)
        )

    # =========================================================================
    # Kind factories
    # =========================================================================

    @classmethod
    def storage_access(
        cls,
        message: str,
        details: Any = None,
        cause: Optional[BaseException] = None,
    ) -> SnippetLibraryError:
        """Create a storage access error."""
        return cls(
            message,
            ErrorKind.STORAGE_ACCESS,
            ErrorSeverity.HIGH,
            code="STORAGE_ACCESS_FAILED",
            details=details,
            suggested_action="Check file permissions and storage location",
            cause=cause,
        )

    @classmethod
    def validation(cls, message: str, details: Any = None) -> SnippetLibraryError:
        """Create a validation error."""
        return cls(
            message,
            ErrorKind.VALIDATION,
            ErrorSeverity.MEDIUM,
            code="VALIDATION_FAILED",
            details=details,
            suggested_action="Please check the input data and try again",
        )

    @classmethod
    def sync_conflict(cls, message: str, details: Any = None) -> SnippetLibraryError:
        """Create a sync conflict error."""
        return cls(
            message,
            ErrorKind.SYNC_CONFLICT,
            ErrorSeverity.MEDIUM,
            code="SYNC_CONFLICT",
            details=details,
            suggested_action="Resolve conflicts and try syncing again",
        )

    @classmethod
    def network(
        cls,
        message: str,
        details: Any = None,
        cause: Optional[BaseException] = None,
    ) -> SnippetLibraryError:
        """Create a network error."""
        return cls(
            message,
            ErrorKind.NETWORK,
            ErrorSeverity.MEDIUM,
            code="NETWORK_ERROR",
            details=details,
            suggested_action="Check network connection and try again",
            cause=cause,
        )

    @classmethod
    def import_export(
        cls,
        message: str,
        details: Any = None,
        cause: Optional[BaseException] = None,
    ) -> SnippetLibraryError:
        """Create an import/export error."""
        return cls(
            message,
            ErrorKind.IMPORT_EXPORT,
            ErrorSeverity.MEDIUM,
            code="IMPORT_EXPORT_FAILED",
            details=details,
            suggested_action="Check file format and try again",
            cause=cause,
        )

    @classmethod
    def search(
        cls,
        message: str,
        details: Any = None,
        cause: Optional[BaseException] = None,
    ) -> SnippetLibraryError:
        """Create a search error."""
        return cls(
            message,
            ErrorKind.SEARCH,
            ErrorSeverity.LOW,
            code="SEARCH_FAILED",
            details=details,
            suggested_action="Try a different search query",
            cause=cause,
        )

    @classmethod
    def snippet_operation(
        cls,
        message: str,
        details: Any = None,
        cause: Optional[BaseException] = None,
    ) -> SnippetLibraryError:
        """Create a snippet operation error."""
        return cls(
            message,
            ErrorKind.SNIPPET_OPERATION,
            ErrorSeverity.MEDIUM,
            code="SNIPPET_OPERATION_FAILED",
            details=details,
            suggested_action="Try the operation again or check snippet data",
            cause=cause,
        )

    @classmethod
    def configuration(
        cls,
        message: str,
        details: Any = None,
        cause: Optional[BaseException] = None,
    ) -> SnippetLibraryError:
        """Create a configuration error."""
        return cls(
            message,
            ErrorKind.CONFIGURATION,
            ErrorSeverity.HIGH,
            code="CONFIGURATION_ERROR",
            details=details,
            suggested_action="Check configuration settings and reset if needed",
            cause=cause,
        )

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for transport or persistence."""
        return {
            "name": type(self).__name__,
            "message": self._message,
            "kind": self._kind.value,
            "severity": self._severity.value,
            "code": self._code,
            "details": self._details,
            "recoverable": self._recoverable,
            "suggested_action": self._suggested_action,
            "timestamp": self._timestamp.isoformat(),
            "context": self.context,
            "cause": repr(self._cause) if self._cause is not None else None,
            "stack": self.stack,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._message!r}, kind={self._kind.value}, "
            f"severity={self._severity.value}, code={self._code})"
        )

    # =========================================================================
    # Copy and pickle support
    # =========================================================================

    def __reduce__(self):
        # Exception.__reduce__ only replays args, which lack kind
        return (
            type(self),
            (self._message, self._kind, self._severity),
            dict(self.__dict__),
        )

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)
        if self._cause is not None:
            self.__cause__ = self._cause


def normalize_error(failure: Any) -> SnippetLibraryError:
    """
    Convert any failure into a SnippetLibraryError.

    Idempotent: a SnippetLibraryError is returned unchanged.

    Args:
        failure: Exception, string or arbitrary value

    Returns:
        Typed error (snippet_operation kind for anything not already typed)
    """
    if isinstance(failure, SnippetLibraryError):
        return failure

    if isinstance(failure, BaseException):
        return SnippetLibraryError.snippet_operation(
            str(failure) or type(failure).__name__,
            {"original_error": repr(failure)},
            cause=failure,
        )

    message = failure if isinstance(failure, str) else UNKNOWN_ERROR_MESSAGE
    return SnippetLibraryError.snippet_operation(
        message,
        {"original_error": failure},
    )
