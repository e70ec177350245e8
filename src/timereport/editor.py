#!/usr/bin/env python3
"""
Launch the user's editor on the log file.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from .errors import EditorLaunchError

DEFAULT_EDITOR = "vi"
LINE_ARGUMENT_EDITORS = {"vi", "vim", "nvim", "hx", "nano", "emacs", "kak", "micro"}


def resolve_editor(configured: Optional[str] = None) -> List[str]:
    """
    Return the editor command as an argument list.

    Parameters
    ----------
    configured : Optional[str], optional
        Editor from settings; takes precedence over the environment.

    Returns
    -------
    List[str]
        Editor command split into arguments.

    Examples
    --------
    >>> resolve_editor("code --wait")
    ['code', '--wait']
    """
    for candidate in (configured, os.environ.get("VISUAL"), os.environ.get("EDITOR")):
        if candidate and candidate.strip():
            return shlex.split(candidate)
    return [DEFAULT_EDITOR]


def supports_line_argument(command: List[str]) -> bool:
    """
    Return True when the editor accepts a ``+LINE`` argument.

    Examples
    --------
    >>> supports_line_argument(["/usr/bin/vim"])
    True
    >>> supports_line_argument(["code", "--wait"])
    False
    """
    if not command:
        return False
    return os.path.basename(command[0]) in LINE_ARGUMENT_EDITORS


def build_editor_command(
    path: Path,
    line_number: Optional[int] = None,
    configured: Optional[str] = None,
) -> List[str]:
    """
    Build the full editor invocation.

    Examples
    --------
    >>> build_editor_command(Path("log.txt"), 12, "vim")
    ['vim', '+12', 'log.txt']
    >>> build_editor_command(Path("log.txt"), None, "vim")
    ['vim', 'log.txt']
    """
    command = resolve_editor(configured)
    if line_number and supports_line_argument(command):
        command.append(f"+{line_number}")
    command.append(str(path))
    return command


def edit_file(
    path: Path,
    line_number: Optional[int] = None,
    *,
    configured: Optional[str] = None,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> None:
    """
    Run the editor and block until it exits.

    Raises
    ------
    EditorLaunchError
        When the editor cannot be started or exits with a failure status.
    """
    command = build_editor_command(path, line_number, configured)
    try:
        result = run(command, check=False)
    except OSError as exc:
        raise EditorLaunchError(command[0], exc.strerror or str(exc)) from exc
    if result.returncode != 0:
        raise EditorLaunchError(
            command[0],
            f"exited with status {result.returncode}",
            returncode=result.returncode,
        )
