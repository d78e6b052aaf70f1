"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of the resilience core:
    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Support for configuration profiles

Configuration Structure:
    - ResilienceConfig: Root configuration object
    - EventLogConfig: Level threshold, capacity, sinks
    - RetryConfig: Backoff, jitter, retryable kinds
    - HandlingOptions: Per-call coordinator options
"""

from snippet_resilience.config.loader import ConfigLoader, load_config
from snippet_resilience.config.models import (
    DEFAULT_RETRYABLE_KINDS,
    EventLogConfig,
    HandlingOptions,
    ResilienceConfig,
    RetryConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "DEFAULT_RETRYABLE_KINDS",
    "EventLogConfig",
    "HandlingOptions",
    "ResilienceConfig",
    "RetryConfig",
]
