"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic. Every field
is enumerated here with its default; call-time overrides go through
with_overrides(), which re-validates the merged result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from snippet_resilience.domain.errors import ErrorKind
from snippet_resilience.domain.value_objects import LogLevel

DEFAULT_RETRYABLE_KINDS: FrozenSet[ErrorKind] = frozenset(
    {ErrorKind.NETWORK, ErrorKind.STORAGE_ACCESS, ErrorKind.SYNC_CONFLICT}
)


class _OverridableModel(BaseModel):
    """Base for models that support validated struct updates."""

    def with_overrides(self, **changes: Any):
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)


class EventLogConfig(_OverridableModel):
    """Configuration for the in-memory event log and its sinks."""

    min_level: LogLevel = Field(default=LogLevel.INFO)
    max_entries: int = Field(default=1000, ge=1)
    console_enabled: bool = True
    console_json: bool = False
    file_enabled: bool = False
    file_path: Optional[Path] = None

    @field_validator("min_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    @model_validator(mode="after")
    def _check_file_sink(self) -> EventLogConfig:
        if self.file_enabled and self.file_path is None:
            raise ValueError("file_path is required when file_enabled is set")
        return self


class RetryConfig(_OverridableModel):
    """Configuration for retry with exponential backoff."""

    max_retries: int = Field(default=3, ge=0)
    initial_delay_ms: int = Field(default=1000, ge=0)
    max_delay_ms: int = Field(default=10_000, ge=0)
    exponential_backoff: bool = True
    retryable_kinds: FrozenSet[ErrorKind] = Field(
        default_factory=lambda: DEFAULT_RETRYABLE_KINDS
    )
    jitter: bool = True
    jitter_ratio: float = Field(default=0.05, ge=0, le=1)  # +/- fraction of delay

    model_config = {"frozen": True}

    @classmethod
    def for_network(cls) -> RetryConfig:
        """Preset for network operations."""
        return cls(
            max_retries=5,
            initial_delay_ms=500,
            retryable_kinds=frozenset({ErrorKind.NETWORK}),
        )

    @classmethod
    def for_storage(cls) -> RetryConfig:
        """Preset for storage operations."""
        return cls(
            max_retries=3,
            initial_delay_ms=1000,
            retryable_kinds=frozenset({ErrorKind.STORAGE_ACCESS}),
        )


class HandlingOptions(_OverridableModel):
    """Per-call options for the resilience coordinator."""

    max_retries: int = Field(default=0, ge=0)  # 0 = run once, no retry
    retry_delay_ms: int = Field(default=1000, ge=0)
    exponential_backoff: bool = True
    log_errors: bool = True
    auto_recover: bool = True
    retryable_kinds: Optional[FrozenSet[ErrorKind]] = None  # None = retry config default

    model_config = {"frozen": True}


class ResilienceConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    event_log: EventLogConfig = Field(default_factory=EventLogConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    handling: HandlingOptions = Field(default_factory=HandlingOptions)
    install_default_strategies: bool = True

    model_config = {"populate_by_name": True}
