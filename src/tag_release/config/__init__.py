"""Configuration management for tag-release."""

from __future__ import annotations

from tag_release.config.loader import get_input, load_context, load_inputs
from tag_release.config.models import ActionInputs, GitHubContext, parse_boolean

__all__ = [
    "ActionInputs",
    "GitHubContext",
    "get_input",
    "load_context",
    "load_inputs",
    "parse_boolean",
]
