"""Command line interface for tag-release."""

from __future__ import annotations

from tag_release.cli.app import app, main

__all__ = ["app", "main"]
