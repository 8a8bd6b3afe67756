"""Core business logic for tag-release.

This module contains the fundamental building blocks:
- Semantic version parsing and precedence
- Release tag resolution
- Commit history retrieval
- Conventional commit parsing
- Changelog generation
- Release orchestration
"""

from __future__ import annotations

from tag_release.core.changelog import ChangelogSection, format_changelog_entry, generate_changelog
from tag_release.core.commits import (
    Commit,
    CommitType,
    ParsedCommit,
    filter_commits,
    get_breaking_changes,
    group_commits_by_type,
    is_breaking_change,
    parse_commit_message,
    parse_commits,
)
from tag_release.core.history import get_commits_since_release
from tag_release.core.release import ReleaseRequest, ReleaseResult, create_release_from_tag
from tag_release.core.tags import Tag, find_previous_release_tag, parse_git_tag
from tag_release.core.version import Version, parse_version

__all__ = [
    # Changelog
    "ChangelogSection",
    # Commits
    "Commit",
    "CommitType",
    "ParsedCommit",
    # Release
    "ReleaseRequest",
    "ReleaseResult",
    # Tags
    "Tag",
    # Version
    "Version",
    "create_release_from_tag",
    "filter_commits",
    "find_previous_release_tag",
    "format_changelog_entry",
    "generate_changelog",
    # History
    "get_commits_since_release",
    "get_breaking_changes",
    "group_commits_by_type",
    "is_breaking_change",
    "parse_commit_message",
    "parse_commits",
    "parse_git_tag",
    "parse_version",
]
