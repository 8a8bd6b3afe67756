"""Release orchestration.

Runs the pipeline for one tag push:

1. Parse the tag from the triggering ref and find the previous release tag
2. Fetch the commits since that tag
3. Classify the commits and render the changelog
4. Create the GitHub release

Publishing is the last step, so a failure anywhere leaves no partial
release behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tag_release.actions import WorkflowCommands
from tag_release.core.changelog import generate_changelog
from tag_release.core.commits import parse_commits
from tag_release.core.history import get_commits_since_release
from tag_release.core.tags import find_previous_release_tag, parse_git_tag
from tag_release.exceptions import GitHubAPIError, InvalidInputError, PublishError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tag_release.config.models import ActionInputs, GitHubContext
    from tag_release.core.commits import Commit
    from tag_release.forge.github import GitHubClient


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """Everything needed to create a release."""

    owner: str
    repo: str
    tag_name: str
    name: str
    draft: bool
    prerelease: bool
    body: str

    def to_payload(self) -> dict[str, Any]:
        """Request body for ``POST /repos/{owner}/{repo}/releases``."""
        return {
            "tag_name": self.tag_name,
            "name": self.name,
            "draft": self.draft,
            "prerelease": self.prerelease,
            "body": self.body,
        }


@dataclass(frozen=True, slots=True)
class ReleaseResult:
    """Outcome of a release run.

    Attributes:
        tag_name: Tag that was released
        previous_tag: Tag the changelog was diffed against, empty for a first release
        changelog: Release body
        upload_url: Asset upload URL of the new release, None on a dry run
    """

    tag_name: str
    previous_tag: str
    changelog: str
    upload_url: str | None


def build_changelog(
    commits: Sequence[Commit],
    inputs: ActionInputs,
    log: WorkflowCommands | None = None,
) -> str:
    """Classify commits and render them as the release changelog."""
    log = log or WorkflowCommands()

    with log.group("Generating changelog"):
        parsed = parse_commits(commits, inputs.filter_regex, log=log)
        changelog = generate_changelog(parsed, strict=inputs.strict)
        log.debug("Changelog:")
        log.debug(changelog)

    return changelog


def publish_release(
    client: GitHubClient,
    request: ReleaseRequest,
    log: WorkflowCommands | None = None,
) -> str:
    """Create the release on GitHub.

    Returns:
        The release's asset upload URL

    Raises:
        PublishError: If GitHub rejects the release
    """
    log = log or WorkflowCommands()

    with log.group(f'Generating new GitHub release for the "{request.tag_name}" tag'):
        log.info("Creating new release")
        try:
            return client.create_release(request)
        except GitHubAPIError as e:
            raise PublishError(f'Failed to create release "{request.tag_name}": {e}') from e


def create_release_from_tag(
    client: GitHubClient,
    context: GitHubContext,
    inputs: ActionInputs,
    *,
    dry_run: bool = False,
    log: WorkflowCommands | None = None,
) -> ReleaseResult:
    """Create a release for the tag that triggered the workflow.

    Args:
        client: GitHub client
        context: Triggering event
        inputs: Action inputs
        dry_run: Build the changelog but do not create the release
        log: Workflow command sink

    Returns:
        The release result

    Raises:
        InvalidInputError: If the trigger is not a semver tag push
        PublishError: If the release cannot be created
    """
    log = log or WorkflowCommands()

    with log.group("Determining release tags"):
        release_tag = parse_git_tag(context.ref, log=log)
        if not release_tag:
            raise InvalidInputError(
                f"This does not appear to be a GitHub tag event. (Event: {context.ref})"
            )

        previous_tag = find_previous_release_tag(
            release_tag,
            client.iter_tags(context.owner, context.repo),
            log=log,
        )
        log.info(f'Previous release tag: "{previous_tag}"' if previous_tag else "No previous release tag found")

    commits = get_commits_since_release(
        client, context.owner, context.repo, previous_tag, context.sha, log=log
    )
    changelog = build_changelog(commits, inputs, log=log)

    if dry_run:
        log.info(f'Dry run: skipping creation of the "{release_tag}" release')
        return ReleaseResult(release_tag, previous_tag, changelog, upload_url=None)

    upload_url = publish_release(
        client,
        ReleaseRequest(
            owner=context.owner,
            repo=context.repo,
            tag_name=release_tag,
            name=release_tag,
            draft=inputs.draft,
            prerelease=inputs.prerelease,
            body=changelog,
        ),
        log=log,
    )

    return ReleaseResult(release_tag, previous_tag, changelog, upload_url=upload_url)
