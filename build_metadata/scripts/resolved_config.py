"""
Resolved build configuration.

Provides the ResolvedConfig dataclass carrying everything downstream
pipeline steps (build, image tagging, push, vulnerability gate) need, and
resolve_config(), the single entry point that derives it from a
BuildContext.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Tuple

from . import config
from .build_context import BuildContext, ResolverError, parse_build_number
from .cache_key import CacheEntries, compute_cache_key
from .environment_resolver import (
    format_severity_filter,
    max_memory_for,
    resolve_environment,
    severity_filter_for,
)
from .image_tags import compute_image_tags, image_tag_suffix
from .version_resolver import resolve_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """
    Build parameters derived once per run and never recomputed.

    Attributes mirror the key/value bindings exported to later steps;
    see to_env_bindings() for the exported names.
    """

    environment: str
    vulnerability_severity_filter: FrozenSet[str]
    project_version: str
    image_tag_version: str
    image_tag_latest: str
    cache_key: str
    image_version_ref: str
    image_latest_ref: str
    max_memory_mb: int

    @property
    def severity_string(self) -> str:
        """Severity filter as a comma-joined string."""
        return format_severity_filter(self.vulnerability_severity_filter)

    def to_env_bindings(self) -> List[Tuple[str, str]]:
        """
        Convert to ordered KEY=VALUE bindings for downstream steps.

        Returns:
            List of (name, value) pairs, all values as strings

        Raises:
            ResolverError: If a value contains a line break
        """
        bindings = [
            ("DEPLOY_ENVIRONMENT", self.environment),
            ("VULNERABILITY_SEVERITY", self.severity_string),
            ("PROJECT_VERSION", self.project_version),
            ("DOCKER_IMAGE_TAG", self.image_tag_version),
            ("DOCKER_IMAGE_LATEST_TAG", self.image_tag_latest),
            ("DOCKER_IMAGE_VERSION", self.image_version_ref),
            ("DOCKER_IMAGE_LATEST", self.image_latest_ref),
            ("CACHE_KEY", self.cache_key),
            ("MAX_MEMORY", str(self.max_memory_mb)),
        ]

        for name, value in bindings:
            if "\n" in value or "\r" in value:
                raise ResolverError(f"{name} must be a single line, got {value!r}")

        return bindings

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a dict suitable for JSON output and template rendering.

        The severity filter becomes a list in ascending severity order.
        """
        return {
            "environment": self.environment,
            "vulnerability_severity_filter": self.severity_string.split(","),
            "project_version": self.project_version,
            "image_tag_version": self.image_tag_version,
            "image_tag_latest": self.image_tag_latest,
            "image_version_ref": self.image_version_ref,
            "image_latest_ref": self.image_latest_ref,
            "cache_key": self.cache_key,
            "max_memory_mb": self.max_memory_mb,
        }


def resolve_config(
    context: BuildContext,
    registry: str,
    repository: str,
    cache_entries: CacheEntries = ()
) -> ResolvedConfig:
    """
    Derive the resolved configuration for one run.

    Args:
        context: Facts about this run, supplied by the caller
        registry: Container registry host
        repository: Image repository path
        cache_entries: (path, content) pairs of build configuration files

    Returns:
        ResolvedConfig for the run

    Raises:
        InvalidBuildNumber: If the context's build number is invalid
        InvalidIdentifier: If commit, registry or repository is malformed
    """
    build_number = parse_build_number(context.build_number)
    environment = resolve_environment(context.branch_name)
    project_version = resolve_version(context.raw_version, build_number)
    tags = compute_image_tags(
        context.commit_hash, build_number, registry, repository
    )

    resolved = ResolvedConfig(
        environment=environment,
        vulnerability_severity_filter=severity_filter_for(environment),
        project_version=project_version,
        image_tag_version=image_tag_suffix(context.commit_hash, build_number),
        image_tag_latest=config.LATEST_TAG,
        cache_key=compute_cache_key(cache_entries),
        image_version_ref=tags.version_tag,
        image_latest_ref=tags.latest_tag,
        max_memory_mb=max_memory_for(environment),
    )

    logger.info(
        f"Resolved {context.branch_name!r} to {environment}, "
        f"version {project_version}, image {tags.version_tag}"
    )
    return resolved
