"""Per-terminal client sessions.

Each terminal attaches through its own session grouped onto the base
session: the window set is shared, but the current window is per client,
so two VS Code terminals can sit on different workspaces at once.

Client sessions are named ``<base>-client-<pid>`` and created only when
absent. They are never destroyed here; once the terminal closes they stay
around until the tmux server goes away.
"""

from __future__ import annotations

import logging
import os

from .tmux_manager import TmuxManager, WindowRef

logger = logging.getLogger(__name__)


def client_session_name(base_session: str, pid: int) -> str:
    return f"{base_session}-client-{pid}"


def prepare_client(
    tmux: TmuxManager,
    base_session: str,
    window: WindowRef | str,
    pid: int | None = None,
) -> str:
    """Create or reuse the client session and focus ``window`` in it.

    Only the client session's current window changes; the base session and
    other clients keep theirs.

    Returns:
        The client session name.
    """
    if pid is None:
        pid = os.getpid()
    client = client_session_name(base_session, pid)

    if not tmux.session_exists(client):
        tmux.create_grouped_session(client, base_session)
    else:
        logger.debug("Reusing client session '%s'", client)

    tmux.select_window(client, window)
    return client


def attach_terminal(
    tmux: TmuxManager,
    base_session: str,
    window: WindowRef | str,
    pid: int | None = None,
) -> None:
    """Attach the calling terminal to ``window`` through its client session.

    Does not return on success: the process becomes ``tmux attach-session``.

    Raises:
        ExternalToolError: any step before the exec failed; nothing has been
            handed to tmux yet and the caller's shell can carry on.
    """
    client = prepare_client(tmux, base_session, window, pid)
    tmux.attach(client)
