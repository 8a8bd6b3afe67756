"""Commit history between two releases.

Retrieving history never fails a release. A previous tag that cannot be
resolved falls back to the default branch head, and a comparison that
fails yields no commits, so the release is published with a smaller
(possibly empty) changelog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tag_release.actions import WorkflowCommands
from tag_release.exceptions import DegradedLookupError, GitHubAPIError, RangeFetchError

if TYPE_CHECKING:
    from tag_release.core.commits import Commit
    from tag_release.forge.github import GitHubClient

# GitHub resolves HEAD to the tip of the default branch
DEFAULT_BRANCH_HEAD = "HEAD"


def resolve_base_ref(client: GitHubClient, owner: str, repo: str, previous_tag: str) -> str:
    """Check that the previous release tag exists on the remote.

    Args:
        client: GitHub client
        owner: Repository owner
        repo: Repository name
        previous_tag: Previous release tag name, may be empty

    Returns:
        The tag name, usable as a comparison base

    Raises:
        DegradedLookupError: If there is no previous tag or it cannot be resolved
    """
    if not previous_tag:
        raise DegradedLookupError("no previous release tag")

    try:
        client.get_ref(owner, repo, f"tags/{previous_tag}")
    except GitHubAPIError as e:
        raise DegradedLookupError(str(e)) from e
    return previous_tag


def fetch_commit_range(client: GitHubClient, owner: str, repo: str, base: str, head: str) -> list[Commit]:
    """Get the commits between ``base`` and ``head``.

    Raises:
        RangeFetchError: If the comparison request fails
    """
    try:
        return client.compare_commits(owner, repo, base, head)
    except GitHubAPIError as e:
        raise RangeFetchError(str(e)) from e


def get_commits_since_release(
    client: GitHubClient,
    owner: str,
    repo: str,
    previous_tag: str,
    head_sha: str,
    log: WorkflowCommands | None = None,
) -> list[Commit]:
    """Get the commits made since the previous release.

    Args:
        client: GitHub client
        owner: Repository owner
        repo: Repository name
        previous_tag: Previous release tag name; empty for a first release
        head_sha: Commit being released
        log: Workflow command sink

    Returns:
        Commits oldest first; empty if the comparison failed
    """
    log = log or WorkflowCommands()

    with log.group("Retrieving commit history"):
        log.info("Determining state of the previous release")
        log.info(f'Searching for SHA corresponding to previous "tags/{previous_tag}" release tag')

        try:
            base = resolve_base_ref(client, owner, repo, previous_tag)
        except DegradedLookupError as e:
            log.info(
                f'Could not find SHA corresponding to tag "tags/{previous_tag}" ({e}). '
                "Assuming this is the first release."
            )
            base = DEFAULT_BRANCH_HEAD

        log.info(f"Retrieving commits between {base} and {head_sha}")

        try:
            commits = fetch_commit_range(client, owner, repo, base, head_sha)
        except RangeFetchError as e:
            log.warning(f"Could not find any commits between {base} and {head_sha} ({e})")
            commits = []
        else:
            log.info(f"Successfully retrieved {len(commits)} commits between {base} and {head_sha}")

    return commits
