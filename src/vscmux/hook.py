"""Login-shell hook: put this VS Code terminal into its workspace window.

Called from the block that `vscmux install` writes into ~/.bashrc:

    vscmux hook --session vscode && exit

Flow: guard → resolve the workspace window → cd into it if new → attach
through a per-terminal client session. On success the process becomes
``tmux attach-session`` and the shell exits when tmux does. Whenever the
hook declines or anything fails it exits with HOOK_SKIPPED, and the shell
just carries on as a plain shell. Any non-zero status does the same, so even
a crash before this module is imported leaves the shell usable. Failures
print one line to stderr, never a traceback.

This module must stay cheap to import: it runs on every interactive bash
start-up inside VS Code.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Callable, Mapping

from .attacher import attach_terminal
from .guard import GuardSkipped, check_invocation, workspace_from_env
from .resolver import WorkspaceResolver, bootstrap_directory
from .settings import HookSettings, load_settings
from .tmux_manager import ExternalToolError, TmuxManager

logger = logging.getLogger(__name__)

# Exit status telling the calling shell to continue without tmux
HOOK_SKIPPED = 100


def run_hook(
    settings: HookSettings,
    env: Mapping[str, str],
    cwd: str,
    is_tty: bool,
    tmux: TmuxManager | None = None,
    pid: int | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> int:
    """Run the whole hook flow.

    Args:
        settings: Resolved settings (session name, option key, ...).
        env: Environment to read TMUX / TERM_PROGRAM / VSCODE_CWD from.
        cwd: Fallback workspace when VSCODE_CWD is unset.
        is_tty: Whether stdout is a terminal.
        tmux: TmuxManager to use (built from settings when omitted).
        pid: Process id keying the client session; the calling shell's pid
             when omitted.

    Returns:
        HOOK_SKIPPED when the shell should continue on its own. Returns 0
        only if the final attach returned, which a real exec never does.
    """
    try:
        check_invocation(
            env,
            is_tty,
            which=which,
            term_program=settings.term_program,
            tmux_command=settings.tmux_command,
        )
    except GuardSkipped as e:
        logger.debug("Hook skipped: %s", e.reason)
        return HOOK_SKIPPED

    if tmux is None:
        tmux = TmuxManager(tmux_command=settings.tmux_command)
    if pid is None:
        pid = os.getppid()

    workspace = workspace_from_env(env, cwd)
    session = settings.session_name
    resolver = WorkspaceResolver(
        tmux, option_key=settings.option_key, fallback_slug=settings.fallback_slug
    )

    try:
        resolved = resolver.resolve(session, workspace)
        if resolved.newly_created and workspace:
            try:
                bootstrap_directory(tmux, session, resolved.window, workspace)
            except ExternalToolError as e:
                logger.warning("Could not cd new window into %s: %s", workspace, e)
        attach_terminal(tmux, session, resolved.window, pid=pid)
    except (ExternalToolError, OSError) as e:
        print(f"vscmux: {e} (continuing without tmux)", file=sys.stderr)
        return HOOK_SKIPPED

    return 0


def _parse_hook_args(args: list[str]) -> str | None:
    """Return the --session value, or None when not given."""
    session: str | None = None
    it = iter(args)
    for arg in it:
        if arg == "--session":
            session = next(it, None)
            if session is None:
                raise ValueError("--session requires a value")
        elif arg.startswith("--session="):
            session = arg.split("=", 1)[1]
        else:
            raise ValueError(f"Unknown option: {arg}")
    return session


def hook_main(args: list[str] | None = None) -> int:
    """Entry point for `vscmux hook`. Returns the process exit status.

    Nothing raised here may reach the interpreter: the calling shell only
    exits on status 0, and any other outcome has to leave it usable.
    """
    if args is None:
        args = sys.argv[2:]

    try:
        session = _parse_hook_args(args)
        settings = load_settings()
        if session:
            settings = settings.with_session(session)

        try:
            cwd = os.getcwd()
        except OSError:
            cwd = os.environ.get("PWD", "")

        return run_hook(
            settings,
            os.environ,
            cwd,
            is_tty=sys.stdout.isatty(),
        )
    except Exception as e:
        logger.debug("Hook failed", exc_info=True)
        print(
            f"vscmux: {str(e) or type(e).__name__} (continuing without tmux)",
            file=sys.stderr,
        )
        return HOOK_SKIPPED
