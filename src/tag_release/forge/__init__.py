"""Hosting platform API clients."""

from __future__ import annotations

from tag_release.forge.github import GitHubClient

__all__ = ["GitHubClient"]
