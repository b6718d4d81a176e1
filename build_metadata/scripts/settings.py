"""
Settings loader for build metadata resolution.

Reads the optional build-metadata.yaml file and applies environment
variable overrides (DOCKER_REGISTRY, DOCKER_REPOSITORY).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from . import config

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """Raised when the settings file cannot be read or is malformed."""
    pass


@dataclass(frozen=True)
class Settings:
    """Registry, repository and cache-file settings for a workspace."""
    registry: str = config.DEFAULT_REGISTRY
    repository: str = config.DEFAULT_REPOSITORY
    cache_patterns: Tuple[str, ...] = field(
        default_factory=lambda: tuple(config.CACHE_FILE_PATTERNS)
    )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsError(f"'{name}' must be a mapping")
    return section


def _string(section: Dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise SettingsError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """
    Load settings from a YAML file with environment overrides.

    Args:
        path: Settings file; a missing file means defaults
        environ: Environment variables for overrides (none applied if None)

    Returns:
        Settings instance

    Raises:
        SettingsError: If the file is unreadable, not valid YAML, or has
            wrongly typed values
    """
    data: Dict[str, Any] = {}

    if path is not None and Path(path).exists():
        try:
            loaded = yaml.safe_load(Path(path).read_text())
        except yaml.YAMLError as e:
            raise SettingsError(f"Failed to parse {path}: {e}") from e
        except OSError as e:
            raise SettingsError(f"Failed to read {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise SettingsError(f"{path} must contain a mapping at top level")
        data = loaded
        logger.info(f"Loaded settings from {path}")
    elif path is not None:
        logger.info(f"No settings file at {path}, using defaults")

    docker = _section(data, "docker")
    cache = _section(data, "cache")

    registry = _string(docker, "registry", config.DEFAULT_REGISTRY)
    repository = _string(docker, "repository", config.DEFAULT_REPOSITORY)

    patterns = cache.get("patterns", list(config.CACHE_FILE_PATTERNS))
    if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
        raise SettingsError("'patterns' must be a list of strings")

    if environ:
        registry = environ.get(config.REGISTRY_ENV_VAR) or registry
        repository = environ.get(config.REPOSITORY_ENV_VAR) or repository

    return Settings(
        registry=registry,
        repository=repository,
        cache_patterns=tuple(patterns),
    )
