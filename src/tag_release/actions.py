"""GitHub Actions workflow commands.

The runner reads a small command language from the step's stdout
(``::debug::``, ``::warning::``, ``::group::`` ...) and picks outputs and
exported variables up from the files named by ``$GITHUB_OUTPUT`` and
``$GITHUB_ENV``. This module is the only place that speaks that language;
everything else logs through a WorkflowCommands instance.
"""

from __future__ import annotations

import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


def escape_data(value: str) -> str:
    """Escape a command message so it survives the runner's parser."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a command property value (``name=value`` pairs)."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class WorkflowCommands:
    """Emit workflow commands for the Actions runner.

    Args:
        console: Console that receives the commands. Markup and highlighting
            are disabled on the default console so commands reach the runner
            verbatim.
        environ: Environment used to locate the ``GITHUB_OUTPUT`` and
            ``GITHUB_ENV`` files. Defaults to ``os.environ``.
    """

    def __init__(
        self,
        console: Console | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.console = console or Console(highlight=False, soft_wrap=True)
        self._environ = os.environ if environ is None else environ

    def issue(self, command: str, message: str = "", **properties: str) -> None:
        """Print a raw ``::command key=value::message`` line."""
        props = ",".join(f"{key}={escape_property(val)}" for key, val in properties.items())
        prefix = f"::{command} {props}::" if props else f"::{command}::"
        self._print(f"{prefix}{escape_data(message)}")

    def debug(self, message: str) -> None:
        self.issue("debug", message)

    def info(self, message: str) -> None:
        self._print(message)

    def warning(self, message: str) -> None:
        self.issue("warning", message)

    def error(self, message: str) -> None:
        self.issue("error", message)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold everything logged inside the block under ``title``."""
        self.issue("group", title)
        try:
            yield
        finally:
            self.issue("endgroup")

    def set_output(self, name: str, value: str) -> None:
        """Set a step output readable as ``steps.<id>.outputs.<name>``."""
        if not self._write_file_command("GITHUB_OUTPUT", name, value):
            self.issue("set-output", value, name=name)

    def export_variable(self, name: str, value: str) -> None:
        """Export an environment variable to later steps of the job."""
        if not self._write_file_command("GITHUB_ENV", name, value):
            self.issue("set-env", value, name=name)

    def set_failed(self, message: str) -> None:
        """Mark the step as failed with ``message``.

        The exit code itself is left to the caller.
        """
        self.error(message)

    def _write_file_command(self, env_name: str, name: str, value: str) -> bool:
        file_path = self._environ.get(env_name)
        if not file_path:
            return False

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with Path(file_path).open("a", encoding="utf-8") as fh:
            fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        return True

    def _print(self, line: str) -> None:
        self.console.print(line, markup=False, highlight=False, emoji=False)
