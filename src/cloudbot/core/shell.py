"""External programs: editor, git and anything else we shell out to."""

import logging
import subprocess
from typing import Optional

import click

from cloudbot.core.errors import CollaboratorError

bot_logger = logging.getLogger("cloudbot.shell")


def run(args: list[str], cwd: Optional[str] = None) -> None:
    bot_logger.debug(f"Running {args}")
    try:
        subprocess.run(args, check=True, cwd=cwd)
    except FileNotFoundError as exc:
        raise CollaboratorError(f"{args[0]} not found") from exc
    except subprocess.CalledProcessError as exc:
        raise CollaboratorError(
            f"{args[0]} exited with status {exc.returncode}"
        ) from exc


def edit_file(path: str, editor: Optional[str] = None) -> None:
    """Open ``path`` in ``editor`` (or $VISUAL / $EDITOR) and wait for it."""
    bot_logger.info(f"Editing {path}")
    try:
        click.edit(filename=path, editor=editor)
    except click.ClickException as exc:
        raise CollaboratorError(exc.format_message()) from exc


class Git:
    def __init__(self, program: str = "git") -> None:
        self.program = program

    def commit(self, filename: str, message: str) -> None:
        run([self.program, "commit", filename, "-m", message])

    def push(self) -> None:
        run([self.program, "push"])
