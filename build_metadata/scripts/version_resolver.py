"""
Project version resolution.

The project version comes from the build system when it reports one;
otherwise a fallback of the form 1.0.0-b<build number> is used so every
build still carries a unique version.
"""

import re
from typing import Optional, Union

from . import config
from .build_context import parse_build_number

# "version: 2.5.1" line of `gradle properties -q`
GRADLE_VERSION_PATTERN = re.compile(r'^version:\s*(\S+)\s*$', re.MULTILINE)

# Gradle reports this when the project sets no version
GRADLE_UNSPECIFIED = "unspecified"


def resolve_version(
    raw_version: Optional[str],
    build_number: Union[int, str]
) -> str:
    """
    Resolve the project version for a build.

    Args:
        raw_version: Version from build-system metadata, may be None or blank
        build_number: CI build counter

    Returns:
        raw_version unchanged if it has non-whitespace content, otherwise
        "1.0.0-b<build_number>"

    Raises:
        InvalidBuildNumber: If build_number is not a positive integer

    Examples:
        >>> resolve_version("2.5.1", 42)
        '2.5.1'
        >>> resolve_version("  ", 7)
        '1.0.0-b7'
    """
    number = parse_build_number(build_number)

    if raw_version and raw_version.strip():
        return raw_version

    return f"{config.FALLBACK_VERSION_PREFIX}{number}"


def extract_gradle_version(properties_output: str) -> Optional[str]:
    """
    Extract the project version from `gradle properties -q` output.

    Args:
        properties_output: Captured stdout of the properties task

    Returns:
        The version string, or None if absent or "unspecified"
    """
    match = GRADLE_VERSION_PATTERN.search(properties_output or "")
    if not match:
        return None

    version = match.group(1)
    if version == GRADLE_UNSPECIFIED:
        return None

    return version
