"""Release tag resolution.

Finds the tag being released from the triggering ref and the previous
release tag to diff against. Only tags that are valid semantic versions
take part in the search.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from operator import attrgetter
from typing import TYPE_CHECKING

from tag_release.actions import WorkflowCommands
from tag_release.core.version import Version, parse_version
from tag_release.exceptions import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Iterable

TAG_REF_PATTERN = re.compile(r"^(refs/)?tags/(.+)$")


@dataclass(frozen=True, slots=True)
class Tag:
    """A repository tag and its semantic version, if it has one."""

    name: str
    version: Version | None

    @classmethod
    def from_name(cls, name: str) -> Tag:
        return cls(name=name, version=parse_version(name))


def parse_git_tag(ref: str, log: WorkflowCommands | None = None) -> str:
    """Extract the tag name from a ``refs/tags/<name>`` reference.

    ``tags/<name>`` is accepted as well.

    Args:
        ref: Git reference, e.g. ``refs/tags/v1.2.3``
        log: Workflow command sink for debug output

    Returns:
        The tag name, or an empty string if ``ref`` is not a tag reference
    """
    match = TAG_REF_PATTERN.match(ref)
    if match is None:
        (log or WorkflowCommands()).debug(f'Input "{ref}" does not appear to be a tag')
        return ""
    return match.group(2)


def find_previous_release_tag(
    current_tag: str,
    tag_names: Iterable[str],
    log: WorkflowCommands | None = None,
) -> str:
    """Find the release tag that precedes ``current_tag``.

    Args:
        current_tag: Tag being released; must be a semantic version
        tag_names: All tag names of the repository, in any order
        log: Workflow command sink for debug output

    Returns:
        Name of the highest semver tag strictly lower than ``current_tag``,
        or an empty string if there is none (first release)

    Raises:
        InvalidInputError: If ``current_tag`` is not a semantic version
    """
    log = log or WorkflowCommands()

    current_version = parse_version(current_tag)
    if current_version is None:
        raise InvalidInputError(
            f'The current tag "{current_tag}" does not appear to conform to semantic versioning.'
        )

    candidates: list[Tag] = []
    for name in tag_names:
        log.debug(f"Currently processing tag {name}")
        tag = Tag.from_name(name)
        if tag.version is not None:
            candidates.append(tag)

    candidates.sort(key=attrgetter("version"), reverse=True)

    for tag in candidates:
        if tag.version is not None and tag.version < current_version:
            return tag.name

    return ""
