"""tag-release: GitHub releases with conventional-commit changelogs from tag pushes."""

from __future__ import annotations

__version__ = "0.1.0"
