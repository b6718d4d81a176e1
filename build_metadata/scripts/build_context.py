"""
Build context for build metadata resolution.

Provides the BuildContext dataclass: the facts a CI run supplies about
itself (branch, commit, build counter, raw project version). A context is
constructed once per pipeline run and threaded explicitly into the
resolvers, which never read ambient environment state themselves.
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

from . import config

logger = logging.getLogger(__name__)

# ASCII digits only
BUILD_NUMBER_PATTERN = re.compile(r"[0-9]+")


class ResolverError(Exception):
    """Base exception for build metadata resolution errors."""
    pass


class InvalidBuildNumber(ResolverError):
    """Raised when the build counter is not a positive integer."""
    pass


class InvalidIdentifier(ResolverError):
    """Raised when a registry, repository or commit identifier is malformed."""
    pass


def parse_build_number(value: Union[int, str, None]) -> int:
    """
    Validate a build counter and return it as an int.

    Args:
        value: Build number as supplied by the CI runtime (e.g. 42 or "42")

    Returns:
        The build number as a positive integer

    Raises:
        InvalidBuildNumber: If the value is missing, non-numeric or not positive
    """
    # bool is an int subclass; True must not pass as build 1
    if isinstance(value, bool):
        raise InvalidBuildNumber(f"Build number must be numeric, got {value!r}")

    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and BUILD_NUMBER_PATTERN.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        raise InvalidBuildNumber(f"Build number must be numeric, got {value!r}")

    if number <= 0:
        raise InvalidBuildNumber(f"Build number must be positive, got {number}")

    return number


def _first_env(environ: Mapping[str, str], names: Sequence[str]) -> str:
    """Return the first non-empty value among the given variable names."""
    for name in names:
        value = environ.get(name, "").strip()
        if value:
            return value
    return ""


@dataclass(frozen=True)
class BuildContext:
    """
    Per-run facts supplied by the CI runtime.

    Attributes:
        branch_name: Short name of the current ref (e.g. "main", "release/2.3")
        commit_hash: Short commit SHA
        build_number: Positive, monotonically increasing CI run counter
        raw_version: Version reported by the build system, may be empty
    """

    branch_name: str
    commit_hash: str
    build_number: int
    raw_version: Optional[str] = None

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str],
        raw_version: Optional[str] = None
    ) -> "BuildContext":
        """
        Construct a context from CI runtime variables.

        Understands GitHub Actions (GITHUB_REF_NAME, GITHUB_SHA,
        GITHUB_RUN_NUMBER) and Jenkins (BRANCH_NAME, GIT_BRANCH, GIT_COMMIT,
        BUILD_NUMBER) names. BUILD_BRANCH, BUILD_COMMIT and
        BUILD_NUMBER_OVERRIDE take precedence over both.

        Args:
            environ: Mapping of environment variables (usually os.environ)
            raw_version: Build-system version; defaults to PROJECT_VERSION_RAW

        Returns:
            BuildContext for this run

        Raises:
            InvalidBuildNumber: If no valid build number is available
        """
        branch = _first_env(environ, config.BRANCH_ENV_VARS)
        # Jenkins multibranch reports GIT_BRANCH as "origin/<branch>"
        if branch.startswith("origin/"):
            branch = branch[len("origin/"):]

        commit = _first_env(environ, config.COMMIT_ENV_VARS)
        commit = commit[:config.SHORT_SHA_LENGTH]

        build_number = parse_build_number(
            _first_env(environ, config.BUILD_NUMBER_ENV_VARS)
        )

        if raw_version is None:
            raw_version = environ.get(config.RAW_VERSION_ENV_VAR, "")

        logger.debug(
            f"Build context: branch={branch!r} commit={commit!r} "
            f"build={build_number} raw_version={raw_version!r}"
        )

        return cls(
            branch_name=branch,
            commit_hash=commit,
            build_number=build_number,
            raw_version=raw_version,
        )
