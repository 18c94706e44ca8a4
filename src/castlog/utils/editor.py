"""Open touched files in the user's editor."""

import os
import subprocess
from pathlib import Path

from castlog.utils.errors import CastlogError


class EditorError(CastlogError):
    """The editor could not be started or exited with an error."""

    pass


def edit_files(paths: list[Path], editor: str | None = None) -> None:
    """Run $EDITOR on paths, attached to the controlling terminal.

    Args:
        paths: Files to edit
        editor: Editor command (defaults to the EDITOR environment variable)

    Raises:
        EditorError: If no editor is defined or it fails
    """
    editor = editor or os.environ.get("EDITOR")
    if not editor:
        raise EditorError("No EDITOR is defined")

    try:
        with open("/dev/tty", "r+") as tty:
            result = subprocess.run(
                [editor, *[str(p) for p in paths]],
                stdin=tty,
                stdout=tty,
                stderr=subprocess.PIPE,
                text=True,
            )
    except OSError as e:
        raise EditorError(f"Starting {editor}: {e}") from e

    if result.returncode != 0:
        raise EditorError(result.stderr.strip() or f"{editor} exited with {result.returncode}")
