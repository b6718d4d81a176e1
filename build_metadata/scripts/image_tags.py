"""
Container image tag computation.

Builds the two references a pipeline pushes for every image: an immutable
"<commit>-<build>" tag and the moving "latest" tag.
"""

import re
from dataclasses import dataclass
from typing import Union

from . import config
from .build_context import InvalidIdentifier, parse_build_number

REGISTRY_PATTERN = re.compile(
    r'[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::[0-9]+)?'
)
REPOSITORY_PATTERN = re.compile(r'[a-z0-9/_.-]+')
COMMIT_PATTERN = re.compile(r'[A-Za-z0-9_.-]+')


@dataclass(frozen=True)
class ImageTags:
    """Fully qualified image references for one build."""
    version_tag: str
    latest_tag: str


def image_tag_suffix(commit_hash: str, build_number: int) -> str:
    """Tag component identifying one build of one commit."""
    return f"{commit_hash}-{build_number}"


def compute_image_tags(
    commit_hash: str,
    build_number: Union[int, str],
    registry: str,
    repository: str
) -> ImageTags:
    """
    Compute the version and latest image references.

    Args:
        commit_hash: Short commit SHA
        build_number: CI build counter
        registry: Registry host, optionally with port (e.g. "docker.io")
        repository: Image repository path (e.g. "org/app")

    Returns:
        ImageTags with version_tag "<registry>/<repository>:<commit>-<build>"
        and latest_tag "<registry>/<repository>:latest"

    Raises:
        InvalidIdentifier: If any identifier is empty or malformed
        InvalidBuildNumber: If build_number is not a positive integer

    Examples:
        >>> compute_image_tags("abc123", 9, "docker.io", "org/app").version_tag
        'docker.io/org/app:abc123-9'
    """
    if not commit_hash:
        raise InvalidIdentifier("Commit hash must not be empty")
    if not COMMIT_PATTERN.fullmatch(commit_hash):
        raise InvalidIdentifier(f"Invalid commit hash: {commit_hash!r}")
    if not registry or not REGISTRY_PATTERN.fullmatch(registry):
        raise InvalidIdentifier(f"Invalid registry: {registry!r}")
    if not repository or not REPOSITORY_PATTERN.fullmatch(repository):
        raise InvalidIdentifier(
            f"Invalid repository {repository!r}: "
            "only lowercase letters, digits and / _ . - are allowed"
        )

    number = parse_build_number(build_number)
    image = f"{registry}/{repository}"

    return ImageTags(
        version_tag=f"{image}:{image_tag_suffix(commit_hash, number)}",
        latest_tag=f"{image}:{config.LATEST_TAG}",
    )
