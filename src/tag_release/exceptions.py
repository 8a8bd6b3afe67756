"""Exception hierarchy for tag-release.

Every error raised by this package derives from TagReleaseError so that
the CLI can report any of them with a single handler.

Only some of them end a run. DegradedLookupError and RangeFetchError are
raised and handled inside the commit history step, which degrades to a
smaller (possibly empty) changelog instead of failing the release.
"""

from __future__ import annotations


class TagReleaseError(Exception):
    """Base exception for all tag-release errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(TagReleaseError):
    """Base exception for configuration problems."""


class ConfigValidationError(ConfigError):
    """Raised when action inputs or the workflow context are invalid."""


# =============================================================================
# Release pipeline
# =============================================================================


class InvalidInputError(TagReleaseError):
    """Raised when the release cannot start from the given trigger.

    Either the trigger reference is not a tag reference or the tag is not
    a semantic version.
    """


class GitHubAPIError(TagReleaseError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DegradedLookupError(TagReleaseError):
    """Raised when the previous release tag cannot be resolved on the remote."""


class RangeFetchError(TagReleaseError):
    """Raised when the commits between two references cannot be compared."""


class PublishError(TagReleaseError):
    """Raised when creating the GitHub release fails."""
