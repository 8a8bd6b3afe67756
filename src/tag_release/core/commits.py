"""Conventional commit parsing.

This module parses commit messages following the Conventional Commits
specification (https://www.conventionalcommits.org/).

Format:
    <type>(<scope>): <subject>

    [optional body]

    [optional footer(s)]

``Merge pull request #<id> from <source>`` headers are recognized as
merge commits and carry no type.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tag_release.actions import WorkflowCommands

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

SHORT_SHA_LENGTH = 7

HEADER_PATTERN = re.compile(r"^(?P<type>\w+)(?:\((?P<scope>[^()\n]*)\))?: (?P<subject>.+)$")
MERGE_PATTERN = re.compile(r"^Merge pull request #(?P<issue_id>.*) from (?P<source>.*)$")

# A footer starts with a trailer token: "BREAKING CHANGE: ...", "Refs: ...", "Closes #12"
FOOTER_TOKEN_PATTERN = re.compile(r"^(?:BREAKING[ -]CHANGES?|[\w-]+)(?:: | #)")

BREAKING_CHANGE_PATTERN = re.compile(r"^BREAKING\s+CHANGES?:\s+", re.MULTILINE)


class CommitType(Enum):
    """Recognized commit types, in changelog section order."""

    FEAT = ("feat", "Features")
    FIX = ("fix", "Bug Fixes")
    DOCS = ("docs", "Documentation")
    STYLE = ("style", "Styles")
    REFACTOR = ("refactor", "Code Refactoring")
    PERF = ("perf", "Performance Improvements")
    TEST = ("test", "Tests")
    BUILD = ("build", "Builds")
    CI = ("ci", "Continuous Integration")
    CHORE = ("chore", "Chores")
    REVERT = ("revert", "Reverts")

    def __init__(self, key: str, title: str) -> None:
        self.key = key
        self.title = title

    def __str__(self) -> str:
        return self.key

    @classmethod
    def from_string(cls, value: str | None) -> CommitType | None:
        """Look a type up by its key, ignoring case."""
        if not value:
            return None
        return _TYPES_BY_KEY.get(value.lower())


_TYPES_BY_KEY = {commit_type.key: commit_type for commit_type in CommitType}


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit as reported by the hosting platform."""

    sha: str
    message: str
    author_name: str = ""
    author_email: str = ""
    date: datetime | None = None
    html_url: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]

    @property
    def subject_line(self) -> str:
        return self.message.strip().split("\n", 1)[0].strip()


@dataclass(frozen=True, slots=True)
class MergeInfo:
    """Pull request number and source branch of a merge commit."""

    issue_id: str
    source: str


@dataclass(frozen=True, slots=True)
class CommitMessage:
    """The parts of a commit message."""

    header: str
    type: str | None = None
    scope: str | None = None
    subject: str | None = None
    body: str | None = None
    footer: str | None = None
    merge: MergeInfo | None = None


def parse_commit_message(message: str) -> CommitMessage:
    """Split a commit message into header, body and footer.

    Args:
        message: Full commit message

    Returns:
        The parsed message. ``type``, ``scope`` and ``subject`` are None
        when the header is not a conventional commit header.
    """
    text = message.replace("\r\n", "\n").strip()
    header, _, rest = text.partition("\n")
    header = header.strip()

    commit_type = scope = subject = None
    merge = None

    if merge_match := MERGE_PATTERN.match(header):
        merge = MergeInfo(issue_id=merge_match["issue_id"], source=merge_match["source"])
    elif header_match := HEADER_PATTERN.match(header):
        commit_type = header_match["type"]
        scope = header_match["scope"] or None
        subject = header_match["subject"].strip()

    body, footer = _split_body_and_footer(rest)

    return CommitMessage(
        header=header,
        type=commit_type,
        scope=scope,
        subject=subject,
        body=body,
        footer=footer,
        merge=merge,
    )


def _split_body_and_footer(text: str) -> tuple[str | None, str | None]:
    paragraphs = [p.strip("\n") for p in re.split(r"\n[ \t]*\n", text.strip("\n"))]
    paragraphs = [p for p in paragraphs if p.strip()]

    for index, paragraph in enumerate(paragraphs):
        if FOOTER_TOKEN_PATTERN.match(paragraph):
            body = "\n\n".join(paragraphs[:index])
            footer = "\n\n".join(paragraphs[index:])
            return body or None, footer

    return "\n\n".join(paragraphs) or None, None


def is_breaking_change(body: str | None, footer: str | None) -> bool:
    """Check whether a body or footer line opens with a BREAKING CHANGE marker."""
    return bool(
        BREAKING_CHANGE_PATTERN.search(body or "") or BREAKING_CHANGE_PATTERN.search(footer or "")
    )


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    """A commit classified as a conventional commit.

    Attributes:
        commit: The original commit
        header: First line of the message
        commit_type: Recognized type, or None
        raw_type: Type as written in the header, recognized or not
        scope: Optional scope
        subject: Subject after the colon, or None for non-conventional headers
        body: Optional body
        footer: Optional footer
        merge: Pull request info for merge commits
        is_breaking: Whether the body or footer declares a breaking change
    """

    commit: Commit
    header: str
    commit_type: CommitType | None
    raw_type: str | None
    scope: str | None
    subject: str | None
    body: str | None
    footer: str | None
    merge: MergeInfo | None
    is_breaking: bool

    @classmethod
    def from_commit(cls, commit: Commit) -> ParsedCommit:
        """Parse a Commit into a ParsedCommit."""
        message = parse_commit_message(commit.message)
        return cls(
            commit=commit,
            header=message.header,
            commit_type=CommitType.from_string(message.type),
            raw_type=message.type,
            scope=message.scope,
            subject=message.subject,
            body=message.body,
            footer=message.footer,
            merge=message.merge,
            is_breaking=is_breaking_change(message.body, message.footer),
        )

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None


def filter_commits(commits: Iterable[Commit], pattern: str) -> list[Commit]:
    """Keep the commits whose message matches ``pattern``.

    Matching is case-insensitive and multiline; an empty pattern keeps
    every commit.
    """
    regex = re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    return [commit for commit in commits if regex.search(commit.message)]


def parse_commits(
    commits: Iterable[Commit],
    filter_pattern: str = "",
    log: WorkflowCommands | None = None,
) -> list[ParsedCommit]:
    """Filter and parse commits, preserving their order.

    Args:
        commits: Commits to classify, oldest first
        filter_pattern: Regex a commit message must match to be kept
        log: Workflow command sink

    Returns:
        One ParsedCommit per commit that passed the filter
    """
    log = log or WorkflowCommands()
    parsed: list[ParsedCommit] = []

    for commit in filter_commits(commits, filter_pattern):
        log.debug(f"Processing commit: {commit.sha} {commit.subject_line}")
        pc = ParsedCommit.from_commit(commit)
        log.debug(
            f"Parsed commit: type={pc.raw_type} scope={pc.scope} "
            f"subject={pc.subject} breaking={pc.is_breaking}"
        )
        log.info(f'Adding commit "{pc.header}" to the changelog')
        parsed.append(pc)

    return parsed


def get_breaking_changes(commits: Iterable[ParsedCommit]) -> list[ParsedCommit]:
    """Get the commits that declare a breaking change."""
    return [pc for pc in commits if pc.is_breaking]


def group_commits_by_type(
    commits: Iterable[ParsedCommit],
) -> dict[CommitType | None, list[ParsedCommit]]:
    """Group commits by recognized type; unrecognized ones go under None."""
    grouped: dict[CommitType | None, list[ParsedCommit]] = {}
    for pc in commits:
        grouped.setdefault(pc.commit_type, []).append(pc)
    return grouped
