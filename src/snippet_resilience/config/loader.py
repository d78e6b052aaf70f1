"""
Configuration Loader - YAML Files, Profiles and Environment Selection.

Resolution order (later wins):
    1. Field defaults in config.models
    2. The base YAML file (config/default.yaml unless given)
    3. The profile overlay config/profiles/<name>.yaml

The profile comes from the explicit argument, else from the
SNIPPET_RESILIENCE_PROFILE environment variable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from snippet_resilience.config.models import ResilienceConfig
from snippet_resilience.domain.errors import SnippetLibraryError

logger = logging.getLogger(__name__)

PROFILE_ENV_VAR = "SNIPPET_RESILIENCE_PROFILE"
DEFAULT_CONFIG_FILE = Path("config") / "default.yaml"
PROFILES_DIR = Path("config") / "profiles"


class ConfigLoader:
    """Loads, merges and validates resilience configuration."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        profiles_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Directory relative paths are resolved against
            profiles_dir: Profile directory (default: <base>/config/profiles)
            environ: Environment used for profile selection (default: os.environ)
        """
        self._base_path = Path(base_path) if base_path else Path(".")
        self._profiles_dir = (
            Path(profiles_dir) if profiles_dir else self._base_path / PROFILES_DIR
        )
        self._environ = os.environ if environ is None else environ

    def load(
        self,
        config_path: Union[str, Path, None] = None,
        profile: Optional[str] = None,
    ) -> ResilienceConfig:
        """
        Load configuration from YAML with an optional profile overlay.

        Args:
            config_path: YAML file (default: config/default.yaml)
            profile: Profile name (default: from environment, else none)

        Returns:
            Validated ResilienceConfig

        Raises:
            FileNotFoundError: If the file or the profile doesn't exist
            SnippetLibraryError: CONFIGURATION kind, for unreadable YAML
            ValidationError: If values are out of range
        """
        path = self._resolve_path(config_path or DEFAULT_CONFIG_FILE)
        config_dict = self._load_yaml(path)

        profile = profile or self._environ.get(PROFILE_ENV_VAR) or None
        if profile:
            config_dict = merge_configs(config_dict, self._load_profile(profile))

        logger.info(f"Loaded resilience config from {path} (profile: {profile or 'none'})")
        return self.load_from_dict(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> ResilienceConfig:
        """Validate a configuration dictionary."""
        return ResilienceConfig.model_validate(config_dict)

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SnippetLibraryError.configuration(
                f"Invalid YAML in {path}", {"path": str(path)}, cause=e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SnippetLibraryError.configuration(
                f"Expected a mapping at the top of {path}, got {type(data).__name__}",
                {"path": str(path)},
            )
        return data

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        profile_path = self._profiles_dir / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into a copy of base; nested mappings merge key by key."""
    result = dict(base)
    for key, value in overlay.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config(
    config_path: Union[str, Path, None] = None,
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> ResilienceConfig:
    """
    Convenience function to load configuration.

    Raises:
        ValidationError: Re-raised after logging which file was invalid
    """
    loader = ConfigLoader(base_path=base_path)
    try:
        return loader.load(config_path, profile)
    except ValidationError:
        logger.error(f"Invalid resilience configuration: {config_path or DEFAULT_CONFIG_FILE}")
        raise
