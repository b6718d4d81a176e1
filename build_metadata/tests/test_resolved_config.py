"""
Unit tests for resolve_config and ResolvedConfig.

These tests verify the one-shot derivation from a BuildContext:
- Environment, severity gate and memory follow the branch
- Version follows the raw version and build number
- Image tags and cache key are carried through
- Env bindings and dict output are complete and ordered
"""

import dataclasses
import hashlib

import pytest

from build_metadata.scripts.build_context import (
    BuildContext,
    InvalidBuildNumber,
    InvalidIdentifier,
    ResolverError,
)
from build_metadata.scripts.cache_key import compute_cache_key
from build_metadata.scripts.resolved_config import ResolvedConfig, resolve_config


@pytest.fixture
def main_context():
    """Context of a production build."""
    return BuildContext(
        branch_name="main",
        commit_hash="abc123",
        build_number=9,
        raw_version="2.5.1",
    )


@pytest.fixture
def cache_entries():
    return [
        ("settings.gradle", b"rootProject.name = 'app'\n"),
        ("build.gradle", b"plugins { id 'java' }\n"),
    ]


class TestResolveConfig:
    """Tests for resolve_config."""

    def test_production_build(self, main_context, cache_entries):
        resolved = resolve_config(main_context, "docker.io", "org/app", cache_entries)

        assert resolved == ResolvedConfig(
            environment="production",
            vulnerability_severity_filter=frozenset({"MEDIUM", "HIGH", "CRITICAL"}),
            project_version="2.5.1",
            image_tag_version="abc123-9",
            image_tag_latest="latest",
            cache_key=compute_cache_key(cache_entries),
            image_version_ref="docker.io/org/app:abc123-9",
            image_latest_ref="docker.io/org/app:latest",
            max_memory_mb=8192,
        )

    def test_feature_branch_with_fallback_version(self):
        ctx = BuildContext(
            branch_name="feature/login",
            commit_hash="def4567",
            build_number=42,
            raw_version="",
        )

        resolved = resolve_config(ctx, "ghcr.io", "org/app")

        assert resolved.environment == "development"
        assert resolved.vulnerability_severity_filter == {"HIGH", "CRITICAL"}
        assert resolved.project_version == "1.0.0-b42"
        assert resolved.max_memory_mb == 4096

    def test_release_branch_is_uat(self):
        ctx = BuildContext("release/2.3", "abc123", 1, "2.3.0")
        assert resolve_config(ctx, "docker.io", "org/app").environment == "uat"

    def test_no_cache_entries_hashes_empty_string(self, main_context):
        resolved = resolve_config(main_context, "docker.io", "org/app")
        assert resolved.cache_key == hashlib.sha256(b"").hexdigest()

    def test_string_build_number_normalised(self):
        """A numeric string from the runtime gives the same tags as an int."""
        ctx = BuildContext("main", "abc123", " 9 ", "")
        resolved = resolve_config(ctx, "docker.io", "org/app")
        assert resolved.image_tag_version == "abc123-9"
        assert resolved.project_version == "1.0.0-b9"

    def test_invalid_build_number_propagates(self):
        ctx = BuildContext("main", "abc123", "nine", "")
        with pytest.raises(InvalidBuildNumber):
            resolve_config(ctx, "docker.io", "org/app")

    def test_empty_commit_propagates(self):
        ctx = BuildContext("main", "", 9, "")
        with pytest.raises(InvalidIdentifier):
            resolve_config(ctx, "docker.io", "org/app")

    def test_invalid_repository_propagates(self, main_context):
        with pytest.raises(InvalidIdentifier):
            resolve_config(main_context, "docker.io", "Org/App")

    def test_result_is_immutable(self, main_context):
        resolved = resolve_config(main_context, "docker.io", "org/app")
        with pytest.raises(dataclasses.FrozenInstanceError):
            resolved.environment = "staging"


class TestOutputs:
    """Tests for to_env_bindings and to_dict."""

    @pytest.fixture
    def resolved(self, main_context, cache_entries):
        return resolve_config(main_context, "docker.io", "org/app", cache_entries)

    def test_env_bindings(self, resolved, cache_entries):
        assert resolved.to_env_bindings() == [
            ("DEPLOY_ENVIRONMENT", "production"),
            ("VULNERABILITY_SEVERITY", "MEDIUM,HIGH,CRITICAL"),
            ("PROJECT_VERSION", "2.5.1"),
            ("DOCKER_IMAGE_TAG", "abc123-9"),
            ("DOCKER_IMAGE_LATEST_TAG", "latest"),
            ("DOCKER_IMAGE_VERSION", "docker.io/org/app:abc123-9"),
            ("DOCKER_IMAGE_LATEST", "docker.io/org/app:latest"),
            ("CACHE_KEY", compute_cache_key(cache_entries)),
            ("MAX_MEMORY", "8192"),
        ]

    def test_env_binding_values_are_strings(self, resolved):
        assert all(isinstance(value, str) for _, value in resolved.to_env_bindings())

    def test_to_dict(self, resolved):
        data = resolved.to_dict()

        assert data["environment"] == "production"
        assert data["vulnerability_severity_filter"] == ["MEDIUM", "HIGH", "CRITICAL"]
        assert data["image_version_ref"] == "docker.io/org/app:abc123-9"
        assert data["max_memory_mb"] == 8192
        assert set(data) == {
            "environment",
            "vulnerability_severity_filter",
            "project_version",
            "image_tag_version",
            "image_tag_latest",
            "image_version_ref",
            "image_latest_ref",
            "cache_key",
            "max_memory_mb",
        }

    @pytest.mark.parametrize("raw_version", [
        "1.0\nDEPLOY_ENVIRONMENT=production",
        "1.0\r\nMAX_MEMORY=1",
        "1.0\n",
    ])
    def test_multiline_value_rejected(self, raw_version):
        """A line break in any value cannot become an extra binding."""
        ctx = BuildContext("feature/x", "abc123", 9, raw_version)
        resolved = resolve_config(ctx, "docker.io", "org/app")

        with pytest.raises(ResolverError, match="PROJECT_VERSION"):
            resolved.to_env_bindings()

    def test_severity_string(self, resolved):
        assert resolved.severity_string == "MEDIUM,HIGH,CRITICAL"
