"""Pydantic models for action inputs and the workflow context."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

DEFAULT_API_URL = "https://api.github.com"

# YAML 1.2 core schema booleans, as accepted by the Actions toolkit
TRUE_VALUES = frozenset({"true", "True", "TRUE"})
FALSE_VALUES = frozenset({"false", "False", "FALSE"})


def parse_boolean(value: object) -> bool:
    """Parse an action input as a boolean.

    An empty string is false. Anything outside the YAML 1.2 core
    schema booleans is rejected.
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text or text in FALSE_VALUES:
        return False
    if text in TRUE_VALUES:
        return True
    raise ValueError(
        f"Input does not meet YAML 1.2 'Core Schema' specification: {value!r}. "
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


class ActionInputs(BaseModel):
    """Inputs declared by the action (``INPUT_*`` variables)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repo_token: SecretStr = Field(description="Token for the GitHub API")
    draft: bool = Field(default=False, description="Create the release as a draft")
    prerelease: bool = Field(default=False, description="Mark the release as a pre-release")
    filter_regex: str = Field(
        default="",
        alias="filter",
        description="Only commits whose message matches this regex are listed",
    )
    strict: bool = Field(
        default=False,
        description="Leave commits without a conventional type out of the changelog",
    )

    @field_validator("repo_token")
    @classmethod
    def _token_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("Input required and not supplied: repo_token")
        return value

    @field_validator("draft", "prerelease", "strict", mode="before")
    @classmethod
    def _parse_boolean(cls, value: object) -> bool:
        return parse_boolean(value)

    @field_validator("filter_regex")
    @classmethod
    def _valid_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid filter regex {value!r}: {e}") from e
        return value


class GitHubContext(BaseModel):
    """The event that triggered the workflow run."""

    model_config = ConfigDict(frozen=True)

    ref: str = Field(description="Fully-formed ref that triggered the run")
    sha: str = Field(min_length=1, description="Commit SHA that triggered the run")
    repository: str = Field(description="Repository in owner/repo form")
    api_url: str = Field(default=DEFAULT_API_URL)

    @field_validator("repository")
    @classmethod
    def _owner_and_repo(cls, value: str) -> str:
        owner, sep, repo = value.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Expected repository in 'owner/repo' form, got {value!r}")
        return value

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") or DEFAULT_API_URL

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]
