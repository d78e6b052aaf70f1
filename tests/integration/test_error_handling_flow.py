"""
Integration Tests for the Complete Error Handling Flow.

Wires a coordinator from YAML configuration and drives failures through
retry, logging, recovery and statistics with real sinks.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import pytest

from snippet_resilience import (
    ActionOutcome,
    ErrorKind,
    RecoveryAction,
    RecoveryStrategy,
    SnippetLibraryError,
    create_coordinator,
    load_config,
)
from snippet_resilience.adapters.memory_sink import InMemoryLogSink
from snippet_resilience.config.loader import ConfigLoader
from snippet_resilience.domain.value_objects import LogLevel


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def file_config(tmp_path: Path):
    log_path = tmp_path / "logs" / "resilience.jsonl"
    config_file = tmp_path / "resilience.yaml"
    config_file.write_text(
        f"""
event_log:
  min_level: debug
  console_enabled: false
  file_enabled: true
  file_path: "{log_path.as_posix()}"
retry:
  max_retries: 2
  initial_delay_ms: 100
  jitter: false
handling:
  max_retries: 2
  retry_delay_ms: 100
"""
    )
    return load_config(config_file), log_path


class TestErrorHandlingFlow:
    """End-to-end tests through create_coordinator."""

    @pytest.mark.asyncio
    async def test_untyped_failure_is_not_retried(self, file_config) -> None:
        """
        SCENARIO: Operation raises a plain ConnectionError with retries enabled
        EXPECTED: Single attempt, handled failure written to the log file
        """
        # Arrange
        config, log_path = file_config
        sleep = RecordingSleep()
        coordinator = create_coordinator(config, sleep=sleep)
        attempts = {"n": 0}

        async def pull_remote() -> dict:
            attempts["n"] += 1
            if attempts["n"] < 3:
                raise ConnectionError("connection reset")
            return {"snippets": 12}

        # Act
        result = await coordinator.execute_with_error_handling(
            pull_remote,
            "pull_remote",
            coordinator.create_context("SyncService", "pull_remote"),
        )
        coordinator.close()

        # Assert
        assert result.success is False
        assert sleep.calls == []
        assert result.error.kind is ErrorKind.SNIPPET_OPERATION
        assert attempts["n"] == 1
        lines = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert any(line["error"] and line["error"]["message"] == "connection reset" for line in lines)

    @pytest.mark.asyncio
    async def test_typed_network_errors_are_retried(self, file_config) -> None:
        """
        SCENARIO: Boundary code raises typed network errors twice
        EXPECTED: Success after three attempts with 100ms and 200ms waits
        """
        config, log_path = file_config
        sleep = RecordingSleep()
        coordinator = create_coordinator(config, sleep=sleep)
        attempts = {"n": 0}

        async def pull_remote() -> dict:
            attempts["n"] += 1
            if attempts["n"] < 3:
                raise SnippetLibraryError.network("connection reset")
            return {"snippets": 12}

        result = await coordinator.execute_with_error_handling(pull_remote, "pull_remote")
        coordinator.close()

        assert result.success is True
        assert result.result == {"snippets": 12}
        assert result.retry_result.attempt_count == 3
        assert sleep.calls == [0.1, 0.2]
        messages = [json.loads(line)["message"] for line in log_path.read_text().splitlines()]
        assert "pull_remote succeeded on attempt 3" in messages

    @pytest.mark.asyncio
    async def test_storage_failure_recovered_by_registered_action(self, tmp_path: Path) -> None:
        """
        SCENARIO: Storage directory missing; subsystem registers create-directory action
        EXPECTED: Automatic recovery creates it and the call is reported successful
        """
        # Arrange
        storage_dir = tmp_path / "library"
        config = ConfigLoader().load_from_dict(
            {
                "event_log": {"console_enabled": False},
                "install_default_strategies": True,
            }
        )
        sink = InMemoryLogSink()
        coordinator = create_coordinator(config, sinks=[sink], sleep=RecordingSleep())

        def create_directory() -> ActionOutcome:
            storage_dir.mkdir(parents=True)
            return ActionOutcome.ok()

        coordinator.recovery_registry.register(
            RecoveryStrategy(
                kind=ErrorKind.STORAGE_ACCESS,
                auto_execute=True,
                priority=0,
                actions=[
                    RecoveryAction(
                        "create_library_dir",
                        "Create Library Directory",
                        "Create the snippet library directory",
                        create_directory,
                        automatic=True,
                    )
                ],
            )
        )

        def save_snippet() -> None:
            if not storage_dir.exists():
                raise SnippetLibraryError.storage_access(f"{storage_dir} does not exist")

        # Act
        result = await coordinator.execute_with_error_handling(save_snippet, "save_snippet")

        # Assert
        assert result.success is True
        assert result.recovery_result.action_executed == "create_library_dir"
        assert storage_dir.is_dir()
        stats = coordinator.get_stats()
        assert stats.by_kind == {"storage_access": 1}
        assert any(e.level is LogLevel.ERROR for e in sink.entries)

    @pytest.mark.asyncio
    async def test_manual_recovery_path(self) -> None:
        """
        SCENARIO: Sync conflict with only built-in strategies
        EXPECTED: No automatic recovery; manual options listed for the user
        """
        coordinator = create_coordinator(
            ConfigLoader().load_from_dict({"event_log": {"console_enabled": False}})
        )
        error = SnippetLibraryError.sync_conflict("Snippet edited on two devices")

        result = await coordinator.handle_error(error)
        message = coordinator.get_user_friendly_message(error)

        assert result.success is False
        assert result.recovery_attempted is False
        assert "Resolve Conflicts" in message
        assert "Force Synchronization" in message
        assert [a.id for a in coordinator.get_recovery_actions(error)] == [
            "resolve_conflicts",
            "force_sync",
        ]
