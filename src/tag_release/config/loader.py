"""Load action inputs and workflow context from the environment.

The Actions runner passes ``with:`` inputs as ``INPUT_<NAME>`` variables
(name upper-cased, spaces replaced by underscores) and describes the
triggering event through ``GITHUB_*`` variables.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from tag_release.config.models import DEFAULT_API_URL, ActionInputs, GitHubContext
from tag_release.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

INPUT_NAMES = ("repo_token", "draft", "prerelease", "filter", "strict")


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Get the raw value of an action input, or None if it is not set.

    Args:
        name: Input name as declared by the action (e.g. ``repo_token``)
        environ: Environment to read from. Defaults to ``os.environ``.

    Returns:
        The input value with surrounding whitespace removed
    """
    env = os.environ if environ is None else environ
    value = env.get(f"INPUT_{name.replace(' ', '_').upper()}")
    return value.strip() if value is not None else None


def load_inputs(environ: Mapping[str, str] | None = None) -> ActionInputs:
    """Build ActionInputs from ``INPUT_*`` variables.

    Raises:
        ConfigValidationError: If an input is missing or invalid
    """
    raw: dict[str, Any] = {}
    for name in INPUT_NAMES:
        value = get_input(name, environ)
        if value is not None:
            raw[name] = value

    try:
        return ActionInputs.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(_format_validation_error("action inputs", e)) from e


def load_context(environ: Mapping[str, str] | None = None) -> GitHubContext:
    """Build the GitHubContext from ``GITHUB_*`` variables.

    Raises:
        ConfigValidationError: If a required variable is missing or invalid
    """
    env = os.environ if environ is None else environ
    raw = {
        "ref": env.get("GITHUB_REF", ""),
        "sha": env.get("GITHUB_SHA", ""),
        "repository": env.get("GITHUB_REPOSITORY", ""),
        "api_url": env.get("GITHUB_API_URL") or DEFAULT_API_URL,
    }

    try:
        return GitHubContext.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(_format_validation_error("workflow context", e)) from e


def _format_validation_error(what: str, error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc']) or what}: {err['msg']}" for err in error.errors()
    )
    return f"Invalid {what}: {problems}"
