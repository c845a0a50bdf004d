"""Graphical file selection through the zenity dialog."""

from __future__ import annotations

import subprocess

DEFAULT_TITLE = "Select a file"


def choose_file(title: str = DEFAULT_TITLE) -> str | None:
    """Ask the user for a file with a zenity dialog.

    Returns the selected path, or None when nothing was chosen or the
    dialog could not be started.
    """
    command = ["zenity", "--file-selection", f"--title={title}"]
    try:
        completed = subprocess.run(
            command, capture_output=True, text=True, check=False
        )
    except OSError:
        return None
    path = (completed.stdout or "").rstrip("\r\n")
    return path or None