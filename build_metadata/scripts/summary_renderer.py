"""
Run summary rendering.

Renders the resolved build configuration as a Markdown summary using a
Mustache template, suitable for $GITHUB_STEP_SUMMARY or the build log.
"""

from pathlib import Path
from typing import Any, Dict

import pystache

from . import config
from .build_context import BuildContext
from .resolved_config import ResolvedConfig

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "summary"


def build_summary_context(
    context: BuildContext,
    resolved: ResolvedConfig
) -> Dict[str, Any]:
    """Assemble the template variables for the summary."""
    data = resolved.to_dict()
    data["branch_name"] = context.branch_name or "(none)"
    data["severity"] = resolved.severity_string
    data["is_fallback_version"] = resolved.project_version.startswith(
        config.FALLBACK_VERSION_PREFIX
    ) and not (context.raw_version or "").strip()
    return data


def render_summary(
    context: BuildContext,
    resolved: ResolvedConfig,
    template_name: str = "build_summary"
) -> str:
    """
    Render the build summary.

    Args:
        context: Build context of the run
        resolved: Resolved configuration of the run
        template_name: Template file name without .mustache extension

    Returns:
        Rendered Markdown

    Raises:
        FileNotFoundError: If the template does not exist
    """
    template_path = TEMPLATE_DIR / f"{template_name}.mustache"
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    renderer = pystache.Renderer(
        missing_tags='strict',
        escape=lambda x: x,     # Markdown, not HTML
    )
    return renderer.render(
        template_path.read_text(), build_summary_context(context, resolved)
    )
