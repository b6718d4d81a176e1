"""
Central configuration for build metadata resolution.
"""

# File paths
SETTINGS_FILE = "build-metadata.yaml"

# Deployment environments
ENV_PRODUCTION = "production"
ENV_STAGING = "staging"
ENV_UAT = "uat"
ENV_DEVELOPMENT = "development"

# Branch patterns
PRODUCTION_BRANCH = "main"
STAGING_BRANCH = "staging"
RELEASE_BRANCH_PREFIX = "release/"

# Vulnerability severities, lowest first
SEVERITY_MEDIUM = "MEDIUM"
SEVERITY_HIGH = "HIGH"
SEVERITY_CRITICAL = "CRITICAL"
SEVERITY_ORDER = (SEVERITY_MEDIUM, SEVERITY_HIGH, SEVERITY_CRITICAL)

# Build memory ceiling in MB
PRODUCTION_MAX_MEMORY = 8192
DEFAULT_MAX_MEMORY = 4096

# Versioning
FALLBACK_VERSION_PREFIX = "1.0.0-b"
LATEST_TAG = "latest"
SHORT_SHA_LENGTH = 7

# Docker defaults
DEFAULT_REGISTRY = "docker.io"
DEFAULT_REPOSITORY = ""

# Build configuration files hashed into the cache key
CACHE_FILE_PATTERNS = ("build.gradle", "gradle.properties", "settings.gradle")

# CI runtime variables, checked in order
BRANCH_ENV_VARS = (
    "BUILD_BRANCH",
    "GITHUB_HEAD_REF",
    "GITHUB_REF_NAME",
    "BRANCH_NAME",
    "GIT_BRANCH",
)
COMMIT_ENV_VARS = ("BUILD_COMMIT", "GITHUB_SHA", "GIT_COMMIT")
BUILD_NUMBER_ENV_VARS = ("BUILD_NUMBER_OVERRIDE", "GITHUB_RUN_NUMBER", "BUILD_NUMBER")
RAW_VERSION_ENV_VAR = "PROJECT_VERSION_RAW"

# Settings overrides
REGISTRY_ENV_VAR = "DOCKER_REGISTRY"
REPOSITORY_ENV_VAR = "DOCKER_REPOSITORY"
