"""Implementation of the 'run' command.

The run command is what the action executes on a tag push: it reads the
action inputs and workflow context from the environment, creates the
release and publishes the step outputs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.text import Text

from tag_release.actions import WorkflowCommands
from tag_release.config import load_context, load_inputs
from tag_release.core.release import create_release_from_tag
from tag_release.forge import GitHubClient

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from tag_release.core.release import ReleaseResult

TAG_ENV_VAR = "AUTOMATIC_RELEASES_TAG"
TAG_OUTPUT = "automatic_releases_tag"
UPLOAD_URL_OUTPUT = "upload_url"


def run_release(
    dry_run: bool,
    console: Console,
    environ: Mapping[str, str] | None = None,
) -> ReleaseResult:
    """Run the run command.

    Args:
        dry_run: Build the changelog without creating the release
        console: Console the workflow commands are printed to
        environ: Environment to read inputs and context from.
            Defaults to ``os.environ``.

    Returns:
        The release result
    """
    log = WorkflowCommands(console, environ)

    try:
        inputs = load_inputs(environ)
        context = load_context(environ)

        with GitHubClient(
            inputs.repo_token.get_secret_value(),
            api_url=context.api_url,
            log=log,
        ) as client:
            result = create_release_from_tag(client, context, inputs, dry_run=dry_run, log=log)

        log.debug(f"Exporting environment variable {TAG_ENV_VAR} with value {result.tag_name}")
        log.export_variable(TAG_ENV_VAR, result.tag_name)
        log.set_output(TAG_OUTPUT, result.tag_name)
        log.set_output(UPLOAD_URL_OUTPUT, result.upload_url or "")
    except Exception as e:
        log.set_failed(str(e))
        raise SystemExit(1) from e

    if dry_run:
        console.print(
            Panel(
                Text(result.changelog) if result.changelog else Text("No changelog entries", style="dim"),
                title=f"[yellow]Dry Run: {result.tag_name}[/]",
                subtitle=f"since {result.previous_tag}" if result.previous_tag else "first release",
                border_style="yellow",
            )
        )

    return result
