#!/usr/bin/env python3
"""
Script to resolve the build metadata for a pipeline run.

Reads the run facts from CI runtime variables (GitHub Actions or Jenkins),
derives the deployment environment, project version, image tags and cache
key once, and exports them for the build, tag and push steps.

Usage:
    python resolve_build.py --root . --settings build-metadata.yaml --summary
"""

import argparse
import json
import logging
import os
import sys
import uuid
from pathlib import Path

# Ensure we can import from local modules
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(os.path.dirname(current_dir))
sys.path.insert(0, parent_dir)

from build_metadata.scripts import config
from build_metadata.scripts.build_context import BuildContext, ResolverError
from build_metadata.scripts.cache_key import discover_cache_files, read_cache_entries
from build_metadata.scripts.resolved_config import resolve_config
from build_metadata.scripts.settings import SettingsError, load_settings
from build_metadata.scripts.summary_renderer import render_summary
from build_metadata.scripts.version_resolver import extract_gradle_version

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Resolve build metadata")
    parser.add_argument("--root", default=".", help="Workspace root to scan for build files")
    parser.add_argument(
        "--settings",
        default=None,
        help=f"Settings file (default: <root>/{config.SETTINGS_FILE})",
    )
    parser.add_argument(
        "--gradle-properties",
        default=None,
        help="File with saved `gradle properties -q` output to read the version from",
    )
    parser.add_argument("--output-file", help="Path to write output JSON to", default=None)
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Append a Markdown summary to $GITHUB_STEP_SUMMARY (stderr if unset)",
    )
    return parser.parse_args(argv)


def _raw_version(args, environ):
    """Raw project version from the environment or saved gradle output."""
    raw = environ.get(config.RAW_VERSION_ENV_VAR, "")
    if raw.strip() or not args.gradle_properties:
        return raw

    version = extract_gradle_version(Path(args.gradle_properties).read_text())
    if version is None:
        print(
            f"::warning::No project version in {args.gradle_properties}",
            file=sys.stderr,
        )
        return ""
    return version


def main(argv=None, environ=None) -> int:
    # No-op when the root logger already has handlers
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)
    environ = os.environ if environ is None else environ

    root = Path(args.root)
    settings_path = args.settings or root / config.SETTINGS_FILE

    try:
        settings = load_settings(settings_path, environ)
        context = BuildContext.from_environ(
            environ, raw_version=_raw_version(args, environ)
        )
        cache_files = discover_cache_files(root, settings.cache_patterns)
        logger.info(f"Cache key over {len(cache_files)} file(s): {', '.join(cache_files)}")
        resolved = resolve_config(
            context,
            registry=settings.registry,
            repository=settings.repository,
            cache_entries=read_cache_entries(root, cache_files),
        )
        bindings = resolved.to_env_bindings()
    except (ResolverError, SettingsError, OSError) as e:
        print(f"::error::Build metadata resolution failed: {e}", file=sys.stderr)
        return 1

    for name, value in bindings:
        print(f"{name}={value}")

    # Export for later steps of the same job
    gh_env = environ.get("GITHUB_ENV")
    if gh_env:
        with open(gh_env, "a") as f:
            for name, value in bindings:
                f.write(f"{name}={value}\n")

    json_output = json.dumps(resolved.to_dict(), indent=2)

    if args.output_file:
        with open(args.output_file, "w") as f:
            f.write(json_output)

    # Also expose to downstream jobs via ${{ fromJson(needs.<job>.outputs.resolved_config) }}
    gh_output = environ.get("GITHUB_OUTPUT")
    if gh_output:
        with open(gh_output, "a") as f:
            delimiter = f"EOF-{uuid.uuid4()}"
            f.write(f"resolved_config<<{delimiter}\n")
            f.write(json_output)
            f.write(f"\n{delimiter}\n")

    if args.summary:
        summary = render_summary(context, resolved)
        step_summary = environ.get("GITHUB_STEP_SUMMARY")
        if step_summary:
            with open(step_summary, "a") as f:
                f.write(summary)
        else:
            print(summary, file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
