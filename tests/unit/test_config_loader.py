"""
Unit Tests for ConfigLoader.

Test Aspects Covered:
    ✅ Business Logic: Config loading, profile merging, defaults
    ✅ Error Handling: Invalid YAML, invalid values, missing files
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from snippet_resilience.config.loader import (
    PROFILE_ENV_VAR,
    ConfigLoader,
    load_config,
    merge_configs,
)
from snippet_resilience.config.models import (
    DEFAULT_RETRYABLE_KINDS,
    EventLogConfig,
    HandlingOptions,
    ResilienceConfig,
    RetryConfig,
)
from snippet_resilience.domain.errors import ErrorKind, SnippetLibraryError
from snippet_resilience.domain.value_objects import LogLevel


def write_profile(base: Path, name: str, content: str) -> None:
    profiles = base / "config" / "profiles"
    profiles.mkdir(parents=True, exist_ok=True)
    (profiles / f"{name}.yaml").write_text(content)


class TestConfigLoader:
    """Test cases for ConfigLoader."""

    def test_loads_sample_config(self, sample_config_path: Path) -> None:
        """
        SCENARIO: Valid YAML configuration file
        EXPECTED: ResilienceConfig with file values
        """
        # Arrange
        loader = ConfigLoader(environ={})

        # Act
        config = loader.load(sample_config_path)

        # Assert
        assert isinstance(config, ResilienceConfig)
        assert config.event_log.min_level is LogLevel.WARN
        assert config.event_log.max_entries == 50
        assert config.retry.max_retries == 2
        assert config.retry.retryable_kinds == frozenset({ErrorKind.NETWORK})
        assert config.handling.auto_recover is False
        assert config.install_default_strategies is False

    def test_applies_defaults(self) -> None:
        """
        SCENARIO: Minimal config with only the version
        EXPECTED: Defaults applied for missing fields
        """
        config = ConfigLoader().load_from_dict({"version": "1.0"})

        assert config.event_log.max_entries == 1000
        assert config.event_log.min_level is LogLevel.INFO
        assert config.retry.max_retries == 3
        assert config.retry.initial_delay_ms == 1000
        assert config.retry.max_delay_ms == 10_000
        assert config.retry.retryable_kinds == DEFAULT_RETRYABLE_KINDS
        assert config.handling.max_retries == 0
        assert config.install_default_strategies is True

    def test_loads_bundled_default_file(self, tmp_path: Path) -> None:
        """
        SCENARIO: No path given
        EXPECTED: config/default.yaml under the base path is used
        """
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "default.yaml").write_text(
            "event_log:\n  max_entries: 7\n"
        )

        config = ConfigLoader(base_path=tmp_path, environ={}).load()

        assert config.event_log.max_entries == 7

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "empty.yaml").write_text("")

        config = ConfigLoader(base_path=tmp_path, environ={}).load("empty.yaml")

        assert config == ResilienceConfig()

    def test_validates_invalid_config(self, tmp_path: Path) -> None:
        """
        SCENARIO: Config with out-of-range values
        EXPECTED: ValidationError raised
        """
        (tmp_path / "invalid.yaml").write_text(
            "event_log:\n  max_entries: 0  # must be >= 1\n"
        )

        with pytest.raises(ValidationError):
            load_config("invalid.yaml", base_path=tmp_path)

    def test_invalid_yaml_is_configuration_error(self, tmp_path: Path) -> None:
        """
        SCENARIO: Unparseable YAML
        EXPECTED: Typed configuration error chaining the parser error
        """
        (tmp_path / "broken.yaml").write_text("retry: [unclosed\n")

        with pytest.raises(SnippetLibraryError) as exc_info:
            ConfigLoader(base_path=tmp_path, environ={}).load("broken.yaml")

        assert exc_info.value.kind is ErrorKind.CONFIGURATION
        assert exc_info.value.cause is not None

    def test_non_mapping_yaml_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "list.yaml").write_text("- a\n- b\n")

        with pytest.raises(SnippetLibraryError):
            ConfigLoader(base_path=tmp_path, environ={}).load("list.yaml")

    def test_file_not_found(self, tmp_path: Path) -> None:
        """
        SCENARIO: Config path doesn't exist
        EXPECTED: FileNotFoundError raised
        """
        loader = ConfigLoader(base_path=tmp_path, environ={})

        with pytest.raises(FileNotFoundError):
            loader.load("nonexistent.yaml")


class TestProfiles:
    """Test cases for profile overlays."""

    def test_profile_overrides_base(self, tmp_path: Path) -> None:
        """
        SCENARIO: Base config plus profile changing one nested key
        EXPECTED: Profile key wins, sibling keys kept
        """
        # Arrange
        (tmp_path / "base.yaml").write_text(
            "event_log:\n  min_level: info\n  max_entries: 200\n"
        )
        write_profile(tmp_path, "quiet", "event_log:\n  min_level: error\n")

        # Act
        config = ConfigLoader(base_path=tmp_path, environ={}).load("base.yaml", "quiet")

        # Assert
        assert config.event_log.min_level is LogLevel.ERROR
        assert config.event_log.max_entries == 200

    def test_profile_from_environment(self, tmp_path: Path) -> None:
        """
        SCENARIO: Profile named only in the environment
        EXPECTED: Profile applied
        """
        (tmp_path / "base.yaml").write_text("retry:\n  max_retries: 1\n")
        write_profile(tmp_path, "ci", "retry:\n  max_retries: 0\n")

        loader = ConfigLoader(base_path=tmp_path, environ={PROFILE_ENV_VAR: "ci"})

        assert loader.load("base.yaml").retry.max_retries == 0

    def test_explicit_profile_beats_environment(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text("")
        write_profile(tmp_path, "a", "version: a\n")
        write_profile(tmp_path, "b", "version: b\n")

        loader = ConfigLoader(base_path=tmp_path, environ={PROFILE_ENV_VAR: "a"})

        assert loader.load("base.yaml", "b").version == "b"

    def test_missing_profile(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text("")

        with pytest.raises(FileNotFoundError):
            ConfigLoader(base_path=tmp_path, environ={}).load("base.yaml", "nope")

    def test_merges_configs(self) -> None:
        """
        SCENARIO: Two configs merged together
        EXPECTED: Overlay values override base values, base untouched
        """
        base = {"retry": {"max_retries": 3, "jitter": True}, "version": "1.0"}
        overlay = {"retry": {"max_retries": 5}}

        merged = merge_configs(base, overlay)

        assert merged["retry"] == {"max_retries": 5, "jitter": True}
        assert merged["version"] == "1.0"
        assert base["retry"]["max_retries"] == 3


class TestModels:
    """Test cases for model validation and overrides."""

    def test_file_sink_requires_path(self) -> None:
        with pytest.raises(ValidationError):
            EventLogConfig(file_enabled=True)

    @pytest.mark.parametrize("raw", ["warn", "WARNING", 2, LogLevel.WARN])
    def test_min_level_parsing(self, raw) -> None:
        assert EventLogConfig(min_level=raw).min_level is LogLevel.WARN

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventLogConfig(min_level="verbose")

    def test_retryable_kinds_from_strings(self) -> None:
        config = RetryConfig(retryable_kinds=["network", "search"])

        assert config.retryable_kinds == frozenset({ErrorKind.NETWORK, ErrorKind.SEARCH})

    def test_with_overrides_validates(self) -> None:
        """
        SCENARIO: Override fields on a frozen config
        EXPECTED: New validated copy, original untouched
        """
        original = RetryConfig()

        updated = original.with_overrides(max_retries=7)

        assert updated.max_retries == 7
        assert original.max_retries == 3
        with pytest.raises(ValidationError):
            original.with_overrides(max_retries=-1)

    def test_handling_options_frozen(self) -> None:
        options = HandlingOptions()

        with pytest.raises(ValidationError):
            options.max_retries = 4  # type: ignore[misc]
