"""Decides whether the login-shell hook should do anything at all.

All inputs are explicit so the decision can be tested without touching the
real environment.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Mapping

DEFAULT_TERM_PROGRAM = "vscode"


class GuardSkipped(Exception):
    """The hook should not run. A normal outcome, not a failure."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def check_invocation(
    env: Mapping[str, str],
    is_tty: bool,
    which: Callable[[str], str | None] = shutil.which,
    term_program: str = DEFAULT_TERM_PROGRAM,
    tmux_command: str = "tmux",
) -> None:
    """Raise GuardSkipped unless the hook should take over this shell.

    Conditions, checked in order:
      - not already inside tmux (``TMUX`` unset or empty);
      - stdout is a terminal;
      - ``TERM_PROGRAM`` equals ``term_program``;
      - the tmux binary is on PATH.
    """
    if env.get("TMUX"):
        raise GuardSkipped("already inside tmux")
    if not is_tty:
        raise GuardSkipped("not an interactive terminal")
    actual = env.get("TERM_PROGRAM", "")
    if actual != term_program:
        raise GuardSkipped(f"TERM_PROGRAM is {actual!r}, expected {term_program!r}")
    if not which(tmux_command):
        raise GuardSkipped(f"{tmux_command} not found on PATH")


def workspace_from_env(env: Mapping[str, str], cwd: str) -> str:
    """Workspace path: ``VSCODE_CWD`` when set and non-empty, else ``cwd``."""
    return env.get("VSCODE_CWD") or cwd
