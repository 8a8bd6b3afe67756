"""Changelog generation from parsed conventional commits.

The changelog is a markdown document with one section per commit type:

    ## Breaking Changes
    - **api**: drop v1 endpoints ([abc1234](https://github.com/...))

    ## Features
    - **api**: drop v1 endpoints ([abc1234](https://github.com/...))
    - add dark mode ([def5678](https://github.com/...))

Breaking changes of typed commits are listed first and again under their
own type. Commits without a recognized type end up in a trailing
"Commits" section unless strict mode is on; a breaking change among them
is listed there and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tag_release.core.commits import CommitType, get_breaking_changes, group_commits_by_type

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tag_release.core.commits import ParsedCommit

BREAKING_CHANGES_TITLE = "Breaking Changes"
OTHER_COMMITS_TITLE = "Commits"


@dataclass(frozen=True, slots=True)
class ChangelogSection:
    """A titled list of changelog entries."""

    title: str
    entries: tuple[str, ...] = field(default=())

    def render(self) -> str:
        return f"## {self.title}\n" + "\n".join(self.entries)


def format_changelog_entry(pc: ParsedCommit) -> str:
    """Format a single commit as a changelog bullet.

    Args:
        pc: Parsed commit

    Returns:
        ``- **scope**: subject ([sha](url))``; the scope part is left out
        when the commit has none. Commits without a conventional subject
        use their header instead.
    """
    scope = f"**{pc.scope}**: " if pc.scope else ""
    subject = pc.subject if pc.subject is not None else pc.header
    return f"- {scope}{subject} ([{pc.commit.short_sha}]({pc.commit.html_url}))"


def build_sections(commits: Sequence[ParsedCommit], *, strict: bool = False) -> list[ChangelogSection]:
    """Group commits into changelog sections, dropping empty ones.

    Args:
        commits: Parsed commits in changelog order
        strict: Leave out commits without a recognized type

    Returns:
        Sections in output order
    """
    grouped = group_commits_by_type(commits)
    breaking = [pc for pc in get_breaking_changes(commits) if pc.is_conventional]

    sections = [ChangelogSection(BREAKING_CHANGES_TITLE, tuple(format_changelog_entry(pc) for pc in breaking))]
    sections.extend(
        ChangelogSection(commit_type.title, tuple(format_changelog_entry(pc) for pc in grouped.get(commit_type, [])))
        for commit_type in CommitType
    )

    if not strict:
        sections.append(
            ChangelogSection(
                OTHER_COMMITS_TITLE,
                tuple(format_changelog_entry(pc) for pc in grouped.get(None, [])),
            )
        )

    return [section for section in sections if section.entries]


def generate_changelog(commits: Sequence[ParsedCommit], *, strict: bool = False) -> str:
    """Render parsed commits as a markdown changelog.

    Args:
        commits: Parsed commits in changelog order
        strict: Leave out commits without a recognized type

    Returns:
        Changelog text, empty when there is nothing to list
    """
    return "\n\n".join(section.render() for section in build_sections(commits, strict=strict)).strip()
