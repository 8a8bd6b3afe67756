"""Allow running as ``python -m tag_release``."""

from __future__ import annotations

from tag_release.cli import main

main()
