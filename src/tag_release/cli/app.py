"""Command line entry point.

The action invokes ``tag-release`` with no arguments; inputs arrive as
``INPUT_*`` environment variables and the trigger as ``GITHUB_*`` ones.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from tag_release import __version__
from tag_release.cli.commands.run import run_release

# Workflow commands must reach the runner verbatim: no highlighting, no wrapping
console = Console(highlight=False, soft_wrap=True)

app = typer.Typer(
    name="tag-release",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"tag-release {__version__}")
        raise typer.Exit


DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", help="Build and print the changelog without creating the release."),
]


@app.callback(invoke_without_command=True)
def default(
    ctx: typer.Context,
    dry_run: DryRunOption = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Create a GitHub release with a conventional-commit changelog from a tag push.

    Without a command, [bold]run[/] is executed.
    """
    if ctx.invoked_subcommand is None:
        run_release(dry_run=dry_run, console=console)


@app.command()
def run(dry_run: DryRunOption = False) -> None:
    """Create a release for the tag in [cyan]GITHUB_REF[/]."""
    run_release(dry_run=dry_run, console=console)


def main() -> None:
    app()
