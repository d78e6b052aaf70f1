"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import List

import pytest

from snippet_resilience.adapters.memory_sink import InMemoryLogSink
from snippet_resilience.config.models import EventLogConfig, RetryConfig
from snippet_resilience.domain.value_objects import LogLevel
from snippet_resilience.observability.event_log import EventLog
from snippet_resilience.resilience.coordinator import ResilienceCoordinator
from snippet_resilience.resilience.recovery import RecoveryRegistry
from snippet_resilience.resilience.retry import RetryOrchestrator


class RecordingSleep:
    """Async sleep double that records requested waits instead of waiting."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def delays_ms(self) -> List[int]:
        return [round(seconds * 1000) for seconds in self.calls]


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure all tests are deterministic."""
    random.seed(42)
    yield


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def memory_sink() -> InMemoryLogSink:
    """Create in-memory sink for testing."""
    return InMemoryLogSink()


@pytest.fixture
def event_log(memory_sink: InMemoryLogSink) -> EventLog:
    """Create event log recording everything, without console output."""
    config = EventLogConfig(min_level=LogLevel.DEBUG, console_enabled=False)
    return EventLog(config, sinks=[memory_sink])


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Create a sleep double for retry waits."""
    return RecordingSleep()


@pytest.fixture
def retry_config() -> RetryConfig:
    """Create retry configuration without jitter."""
    return RetryConfig(
        max_retries=3,
        initial_delay_ms=100,
        max_delay_ms=1000,
        exponential_backoff=True,
        jitter=False,
    )


@pytest.fixture
def retry_orchestrator(
    event_log: EventLog,
    retry_config: RetryConfig,
    recording_sleep: RecordingSleep,
) -> RetryOrchestrator:
    """Create retry orchestrator that never really waits."""
    return RetryOrchestrator(
        event_log,
        retry_config,
        sleep=recording_sleep,
        rng=random.Random(42),
    )


@pytest.fixture
def recovery_registry(event_log: EventLog) -> RecoveryRegistry:
    """Create empty recovery registry."""
    return RecoveryRegistry(event_log)


@pytest.fixture
def coordinator(
    event_log: EventLog,
    recovery_registry: RecoveryRegistry,
    retry_orchestrator: RetryOrchestrator,
) -> ResilienceCoordinator:
    """Create coordinator with an empty registry."""
    return ResilienceCoordinator(event_log, recovery_registry, retry_orchestrator)
