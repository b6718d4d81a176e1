"""
Cache key computation for build tooling.

The cache key is a SHA-256 digest over the contents of the build
configuration files. Entries are always sorted by path before hashing so
the key does not depend on filesystem traversal order.
"""

import hashlib
import logging
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Tuple, Union

from . import config

logger = logging.getLogger(__name__)

CacheEntries = Union[Mapping[str, bytes], Iterable[Tuple[str, bytes]]]

SKIPPED_DIRS = {".git"}


def compute_cache_key(entries: CacheEntries) -> str:
    """
    Compute a deterministic digest of build configuration contents.

    Args:
        entries: (path, content) pairs, or a mapping of path to content

    Returns:
        Hex-encoded SHA-256 of the contents concatenated in path order.
        An empty input yields the digest of the empty string.
    """
    if isinstance(entries, Mapping):
        entries = entries.items()

    digest = hashlib.sha256()
    # Content breaks ties so repeated paths hash the same in any order
    for _path, content in sorted(entries):
        digest.update(content)
    return digest.hexdigest()


def discover_cache_files(
    root: Union[str, Path],
    patterns: Sequence[str] = config.CACHE_FILE_PATTERNS
) -> List[str]:
    """
    Find build configuration files under a directory.

    Args:
        root: Workspace directory to search
        patterns: Basename glob patterns (e.g. "build.gradle")

    Returns:
        Sorted POSIX paths relative to root
    """
    root = Path(root)
    found = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in SKIPPED_DIRS]
        for filename in filenames:
            if any(fnmatch(filename, pattern) for pattern in patterns):
                relative = Path(dirpath, filename).relative_to(root)
                found.append(relative.as_posix())

    logger.debug(f"Discovered {len(found)} cache file(s) under {root}")
    return sorted(found)


def read_cache_entries(
    root: Union[str, Path],
    paths: Iterable[str]
) -> List[Tuple[str, bytes]]:
    """Read the given files relative to root as (path, content) pairs."""
    root = Path(root)
    return [(path, (root / path).read_bytes()) for path in paths]
