"""Semantic version parsing and precedence.

Implements SemVer 2.0.0 (https://semver.org): ``MAJOR.MINOR.PATCH`` with
optional ``-prerelease`` and ``+build`` parts. Tags are commonly written
with a leading ``v`` (``v1.2.3``), which is accepted and dropped.

Precedence ignores build metadata, so ``1.0.0+a == 1.0.0+b``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

_NUMERIC = r"0|[1-9]\d*"
_PRERELEASE_ID = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"^v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$",
    re.ASCII,
)

# Longer strings are never treated as versions
MAX_LENGTH = 256


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        prerelease: Pre-release identifiers, numeric ones as ints
        build: Build metadata identifiers (not used for ordering)
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[int | str, ...] = field(default=())
    build: tuple[str, ...] = field(default=())

    @classmethod
    def parse(cls, version_str: str) -> Version:
        """Parse a version string such as ``v1.2.3-rc.1+build.5``.

        Raises:
            ValueError: If the string is not a valid semantic version
        """
        text = version_str.strip()
        match = SEMVER_PATTERN.match(text) if len(text) <= MAX_LENGTH else None
        if match is None:
            raise ValueError(f"Invalid semantic version: {version_str!r}")

        prerelease: tuple[int | str, ...] = ()
        if match["prerelease"]:
            prerelease = tuple(
                int(ident) if ident.isdigit() else ident
                for ident in match["prerelease"].split(".")
            )
        build = tuple(match["build"].split(".")) if match["build"] else ()

        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            prerelease=prerelease,
            build=build,
        )

    def _precedence_key(self) -> tuple[int, int, int, tuple[object, ...]]:
        # A release outranks any of its pre-releases. Numeric identifiers
        # sort before alphanumeric ones, and a longer list wins a tie.
        if not self.prerelease:
            pre: tuple[object, ...] = (1,)
        else:
            pre = (
                0,
                tuple(
                    (0, ident, "") if isinstance(ident, int) else (1, 0, ident)
                    for ident in self.prerelease
                ),
            )
        return (self.major, self.minor, self.patch, pre)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() == other._precedence_key()

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __hash__(self) -> int:
        return hash(self._precedence_key())

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += "-" + ".".join(str(ident) for ident in self.prerelease)
        if self.build:
            version += "+" + ".".join(self.build)
        return version


def parse_version(version_str: str) -> Version | None:
    """Parse a version string, returning None when it is not valid semver."""
    try:
        return Version.parse(version_str)
    except ValueError:
        return None
