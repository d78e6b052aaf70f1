"""
Value Objects for Domain Layer.

Value objects are immutable objects that describe an event or the
circumstances of a failure but have no conceptual identity.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from snippet_resilience.domain.errors import ErrorSeverity, SnippetLibraryError


class LogLevel(IntEnum):
    """Ordered log levels of the event log."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @classmethod
    def parse(cls, value: Any) -> LogLevel:
        """Parse a level from its name ("warn"), its value (2) or a LogLevel."""
        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARNING":
                name = "WARN"
            try:
                return cls[name]
            except KeyError:
                raise ValueError(f"Unknown log level: {value!r}") from None
        return cls(value)


_SEVERITY_LEVELS: Dict[ErrorSeverity, LogLevel] = {
    ErrorSeverity.LOW: LogLevel.INFO,
    ErrorSeverity.MEDIUM: LogLevel.WARN,
    ErrorSeverity.HIGH: LogLevel.ERROR,
    ErrorSeverity.CRITICAL: LogLevel.FATAL,
}


def level_for_severity(severity: ErrorSeverity) -> LogLevel:
    """Map an error severity onto the log level it is recorded at."""
    return _SEVERITY_LEVELS[ErrorSeverity(severity)]


class ErrorContext(BaseModel):
    """Where a failure happened. Purely descriptive."""

    component: str = Field(..., description="Calling component")
    operation: str = Field(..., description="Operation name")
    user_id: Optional[str] = Field(default=None, description="User identifier")
    session_id: Optional[str] = Field(default=None, description="Session identifier")
    additional_data: Optional[Dict[str, Any]] = Field(
        default=None, description="Free-form extra data"
    )

    model_config = {"frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset fields."""
        return self.model_dump(exclude_none=True)


class LogEntry(BaseModel):
    """A single recorded event. Created only by the event log."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    level: LogLevel
    message: str
    error: Optional[SnippetLibraryError] = None
    context: Optional[ErrorContext] = None
    metadata: Optional[Dict[Any, Any]] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "error": self.error.to_dict() if self.error is not None else None,
            "context": self.context.to_dict() if self.context is not None else None,
            "metadata": self.metadata,
        }
