"""Workspace → tmux window resolution.

Maps a workspace path to one named window inside the base session, creating
the session and/or window on first demand. The window remembers its
workspace in a user option (``@vscode_root`` by default); lookups are a
linear scan over the session's windows, first exact match wins.

There is no lock around "scan, then create": two terminals opened at the
same instant for a new workspace can both create a window. The duplicate is
harmless and later lookups settle on the first one listed.

Key class: WorkspaceResolver. Also: bootstrap_directory().
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass

from .slug import DEFAULT_FALLBACK, window_slug
from .tmux_manager import TmuxManager, WindowAttributeError, WindowRef

logger = logging.getLogger(__name__)

DEFAULT_OPTION_KEY = "@vscode_root"


@dataclass(frozen=True)
class ResolvedWindow:
    """Result of WorkspaceResolver.resolve()."""

    window: WindowRef
    newly_created: bool

    @property
    def window_name(self) -> str:
        return self.window.window_name


class WorkspaceResolver:
    """Finds or creates the window that belongs to a workspace."""

    def __init__(
        self,
        tmux: TmuxManager,
        option_key: str = DEFAULT_OPTION_KEY,
        fallback_slug: str = DEFAULT_FALLBACK,
    ) -> None:
        self.tmux = tmux
        self.option_key = option_key
        self.fallback_slug = fallback_slug

    def resolve(self, base_session: str, workspace_path: str) -> ResolvedWindow:
        """Return the window for ``workspace_path``, creating it if needed.

        The path is an opaque key: it is compared with plain string equality
        and never normalized. An empty path is accepted like any other.

        Raises:
            SpawnError: the session or window could not be created.
            ExternalToolError: tmux failed while listing windows.
        """
        slug = window_slug(workspace_path, self.fallback_slug)

        if not self.tmux.session_exists(base_session):
            window = self.tmux.create_session(base_session, workspace_path, slug)
            self._tag(base_session, window, workspace_path)
            return ResolvedWindow(window, newly_created=True)

        windows = self.tmux.list_windows(base_session)
        for window in windows:
            tagged = self.tmux.get_window_attribute(
                base_session, window, self.option_key
            )
            if tagged == workspace_path:
                logger.debug(
                    "Workspace %s already has window '%s'",
                    workspace_path,
                    window.window_name,
                )
                return ResolvedWindow(window, newly_created=False)

        name = unique_window_name(slug, [w.window_name for w in windows])
        window = self.tmux.create_window(base_session, name, workspace_path)
        self._tag(base_session, window, workspace_path)
        return ResolvedWindow(window, newly_created=True)

    def _tag(self, session: str, window: WindowRef, workspace_path: str) -> None:
        # An untagged window is simply not found next time; a new one is made.
        try:
            self.tmux.set_window_attribute(
                session, window, self.option_key, workspace_path
            )
        except WindowAttributeError as e:
            logger.warning("Window '%s' left untagged: %s", window.window_name, e)


def unique_window_name(slug: str, existing: list[str]) -> str:
    """Return ``slug``, or ``slug-2``, ``slug-3``, ... whichever is free."""
    taken = set(existing)
    if slug not in taken:
        return slug
    counter = 2
    while f"{slug}-{counter}" in taken:
        counter += 1
    return f"{slug}-{counter}"


def cd_command(workspace_path: str) -> str:
    """Shell line that changes into ``workspace_path``.

    The path is single-quoted so spaces, ``$``, backticks and quotes reach
    ``cd`` as one literal argument.
    """
    return f"cd -- {shlex.quote(workspace_path)}"


def bootstrap_directory(
    tmux: TmuxManager, session: str, window: WindowRef, workspace_path: str
) -> None:
    """Type a ``cd`` into a freshly created window.

    Backs up tmux's own ``-c`` start directory, which is ignored when the
    shell's profile changes directory on its own. The command text is sent
    as a literal payload and Enter as a separate control key.
    """
    tmux.send_literal(session, window, cd_command(workspace_path), enter=True)
