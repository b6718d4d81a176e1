"""
Environment resolver for build metadata.

Maps a branch name to its deployment environment and derives the
per-environment build gates: the vulnerability severity filter and the
build memory ceiling.
"""

from typing import AbstractSet, FrozenSet

from . import config


# Ordered rules, first match wins: (match kind, pattern, environment)
BRANCH_RULES = (
    ("exact", config.PRODUCTION_BRANCH, config.ENV_PRODUCTION),
    ("exact", config.STAGING_BRANCH, config.ENV_STAGING),
    ("prefix", config.RELEASE_BRANCH_PREFIX, config.ENV_UAT),
)

PRODUCTION_SEVERITIES = frozenset(config.SEVERITY_ORDER)
DEFAULT_SEVERITIES = frozenset((config.SEVERITY_HIGH, config.SEVERITY_CRITICAL))


def resolve_environment(branch_name: str) -> str:
    """
    Classify a branch into a deployment environment.

    Rules (case-sensitive, first match wins):
    - "main" -> production
    - "staging" -> staging
    - "release/*" -> uat
    - anything else, including "develop" and "" -> development

    Examples:
        >>> resolve_environment("main")
        'production'
        >>> resolve_environment("release/2.3")
        'uat'
        >>> resolve_environment("feature/login")
        'development'
    """
    branch_name = branch_name or ""
    for kind, pattern, environment in BRANCH_RULES:
        if kind == "exact" and branch_name == pattern:
            return environment
        if kind == "prefix" and branch_name.startswith(pattern):
            return environment
    return config.ENV_DEVELOPMENT


def severity_filter_for(environment: str) -> FrozenSet[str]:
    """Severities that fail the vulnerability gate in this environment."""
    if environment == config.ENV_PRODUCTION:
        return PRODUCTION_SEVERITIES
    return DEFAULT_SEVERITIES


def format_severity_filter(severities: AbstractSet[str]) -> str:
    """
    Render a severity filter as the comma-joined string scanners expect.

    Known severities come first in ascending order (MEDIUM,HIGH,CRITICAL);
    anything unrecognised is appended alphabetically.
    """
    known = [s for s in config.SEVERITY_ORDER if s in severities]
    extra = sorted(s for s in severities if s not in config.SEVERITY_ORDER)
    return ",".join(known + extra)


def max_memory_for(environment: str) -> int:
    """Build memory ceiling in MB for the environment."""
    if environment == config.ENV_PRODUCTION:
        return config.PRODUCTION_MAX_MEMORY
    return config.DEFAULT_MAX_MEMORY
