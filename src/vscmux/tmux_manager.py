"""Tmux session/window primitives via libtmux.

Wraps a libtmux Server with the handful of synchronous operations the
login-shell hook needs:
  - session_exists / create_session / create_grouped_session: base and
    per-terminal client sessions.
  - list_windows / create_window / select_window: the shared window set.
  - get_window_attribute / set_window_attribute: the ``@option`` tag that
    records which workspace a window belongs to.
  - send_literal / send_keys: type into a window without tmux key-name
    interpretation of the payload.
  - attach: exec into ``tmux attach-session`` (never returns on success).

Every target is built with tmux's ``=`` exact-match prefix so that a base
session named ``vscode`` is never confused with ``vscode-client-123``.

Key class: TmuxManager.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

import libtmux
from libtmux import exc

logger = logging.getLogger(__name__)


class ExternalToolError(Exception):
    """tmux is missing or exited non-zero for an unexpected reason."""


class SpawnError(ExternalToolError):
    """A required session or window could not be created."""


class WindowAttributeError(ExternalToolError):
    """A window could not be tagged (usually because it vanished)."""


@dataclass(frozen=True)
class WindowRef:
    """A window inside a session.

    ``window_id`` is tmux's stable id (e.g. ``@3``); it is empty when only the
    name is known, in which case the window is addressed by exact name.
    """

    window_name: str
    window_id: str = ""

    @property
    def target(self) -> str:
        if self.window_id:
            return self.window_id
        return f"={self.window_name}"


def _describe(e: BaseException) -> str:
    """Message of ``e``, or its class name when the message is empty."""
    return str(e) or type(e).__name__


def _window_target(session: str, window: WindowRef | str) -> str:
    """Build an exact ``=session:window`` target string."""
    if isinstance(window, WindowRef):
        part = window.target
    elif window.startswith("@"):
        part = window
    else:
        part = f"={window}"
    return f"={session}:{part}"


class TmuxManager:
    """Synchronous tmux operations on one tmux server."""

    def __init__(
        self,
        tmux_command: str = "tmux",
        server: libtmux.Server | None = None,
    ):
        """Initialize tmux manager.

        Args:
            tmux_command: tmux binary, used by libtmux and for the final exec
                into attach-session.
            server: Pre-built libtmux server (tests inject a mock here).
        """
        self.tmux_command = tmux_command
        self._server = server

    @property
    def server(self) -> libtmux.Server:
        """Get or create tmux server connection."""
        if self._server is None:
            self._server = libtmux.Server(tmux_bin=self.tmux_command)
        return self._server

    def _cmd(self, *args: str) -> libtmux.common.tmux_cmd:
        """Run a raw tmux command, mapping libtmux failures to ExternalToolError."""
        try:
            return self.server.cmd(*args)
        except exc.LibTmuxException as e:
            raise ExternalToolError(f"tmux {args[0]} failed: {_describe(e)}") from e

    def _check(self, result: libtmux.common.tmux_cmd, action: str) -> None:
        if result.returncode != 0 or result.stderr:
            detail = " ".join(result.stderr) or f"exit {result.returncode}"
            raise ExternalToolError(f"{action}: {detail}")

    def _get_session(self, name: str) -> libtmux.Session | None:
        try:
            return self.server.sessions.get(session_name=name, default=None)
        except exc.LibTmuxException as e:
            raise ExternalToolError(f"Cannot list tmux sessions: {_describe(e)}") from e

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def session_exists(self, name: str) -> bool:
        """Return True if a session with exactly this name exists."""
        try:
            return self.server.has_session(name, exact=True)
        except exc.LibTmuxException as e:
            raise ExternalToolError(f"tmux has-session failed: {_describe(e)}") from e

    def create_session(
        self, name: str, start_dir: str, initial_window_name: str
    ) -> WindowRef:
        """Create a detached session and return its first window.

        Raises:
            SpawnError: tmux could not be invoked or refused the session.
        """
        try:
            session = self.server.new_session(
                session_name=name,
                start_directory=start_dir or None,
                window_name=initial_window_name,
                attach=False,
            )
            window = session.windows[0]
        except (exc.LibTmuxException, IndexError) as e:
            raise SpawnError(
                f"Failed to create session '{name}': {_describe(e)}"
            ) from e

        logger.info(
            "Created session '%s' with window '%s' at %s",
            name,
            initial_window_name,
            start_dir,
        )
        return WindowRef(
            window_name=window.window_name or initial_window_name,
            window_id=window.window_id or "",
        )

    def create_grouped_session(self, name: str, base_session: str) -> None:
        """Create a detached session sharing ``base_session``'s window set.

        The new session keeps its own current-window pointer, so selecting a
        window in it does not move focus for other clients.
        """
        try:
            result = self.server.cmd(
                "new-session", "-d", "-s", name, "-t", f"={base_session}"
            )
        except exc.LibTmuxException as e:
            raise SpawnError(
                f"Failed to create client session '{name}': {_describe(e)}"
            ) from e
        if result.returncode != 0 or result.stderr:
            raise SpawnError(
                f"Failed to create client session '{name}': "
                + (" ".join(result.stderr) or f"exit {result.returncode}")
            )
        logger.debug("Created client session '%s' grouped to '%s'", name, base_session)

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------

    def list_windows(self, session: str) -> list[WindowRef]:
        """List windows of a session in server order (by window index)."""
        sess = self._get_session(session)
        if sess is None:
            return []
        try:
            return [
                WindowRef(
                    window_name=window.window_name or "",
                    window_id=window.window_id or "",
                )
                for window in sess.windows
            ]
        except exc.LibTmuxException as e:
            raise ExternalToolError(
                f"Cannot list windows of '{session}': {_describe(e)}"
            ) from e

    def list_window_names(self, session: str) -> list[str]:
        return [w.window_name for w in self.list_windows(session)]

    def create_window(self, session: str, name: str, start_dir: str) -> WindowRef:
        """Create a detached window (does not change any session's focus).

        Raises:
            SpawnError: session vanished or tmux refused the window.
        """
        sess = self._get_session(session)
        if sess is None:
            raise SpawnError(f"Session '{session}' does not exist")
        try:
            window = sess.new_window(
                window_name=name,
                start_directory=start_dir or None,
                attach=False,
            )
        except exc.LibTmuxException as e:
            raise SpawnError(f"Failed to create window '{name}': {_describe(e)}") from e

        logger.info("Created window '%s' (id=%s) at %s", name, window.window_id, start_dir)
        return WindowRef(window_name=name, window_id=window.window_id or "")

    def select_window(self, session: str, window: WindowRef | str) -> None:
        result = self._cmd("select-window", "-t", _window_target(session, window))
        self._check(result, f"Cannot select window {window} in '{session}'")

    # ------------------------------------------------------------------
    # Window options
    # ------------------------------------------------------------------

    def get_window_attribute(
        self, session: str, window: WindowRef | str, key: str
    ) -> str | None:
        """Read a window user option.

        Returns:
            The value, or None when the option is unset or the window is gone.
        """
        result = self._cmd(
            "show-options", "-w", "-v", "-t", _window_target(session, window), key
        )
        if result.returncode != 0 or result.stderr:
            return None
        return "\n".join(result.stdout)

    def set_window_attribute(
        self, session: str, window: WindowRef | str, key: str, value: str
    ) -> None:
        """Set a window user option.

        Raises:
            WindowAttributeError: the window could not be tagged.
        """
        try:
            result = self.server.cmd(
                "set-option", "-w", "-t", _window_target(session, window), key, value
            )
        except exc.LibTmuxException as e:
            raise WindowAttributeError(
                f"Cannot set {key} on {window}: {_describe(e)}"
            ) from e
        if result.returncode != 0 or result.stderr:
            raise WindowAttributeError(
                f"Cannot set {key} on {window}: "
                + (" ".join(result.stderr) or f"exit {result.returncode}")
            )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def send_keys(self, session: str, window: WindowRef | str, *keys: str) -> None:
        """Send tmux key names (``Enter``, ``C-c``, ...) to a window."""
        result = self._cmd("send-keys", "-t", _window_target(session, window), *keys)
        self._check(result, f"Cannot send keys to {window}")

    def send_literal(
        self,
        session: str,
        window: WindowRef | str,
        text: str,
        enter: bool = True,
    ) -> None:
        """Send ``text`` character by character, then optionally Enter.

        The payload goes through ``send-keys -l`` so words like ``Enter`` or
        ``C-c`` inside it are typed, not interpreted as keys. Enter is sent
        as a separate control key.
        """
        target = _window_target(session, window)
        result = self._cmd("send-keys", "-t", target, "-l", "--", text)
        self._check(result, f"Cannot send text to {window}")
        if enter:
            self.send_keys(session, window, "Enter")

    # ------------------------------------------------------------------
    # Attach
    # ------------------------------------------------------------------

    def attach(self, session: str) -> None:
        """Replace the current process with ``tmux attach-session``.

        Never returns on success. Anything that must happen before the
        terminal is handed to tmux has to run before this call.
        """
        argv = [self.tmux_command, "attach-session", "-t", f"={session}"]
        logger.debug("Exec: %s", " ".join(argv))
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            os.execvp(self.tmux_command, argv)
        except OSError as e:
            raise ExternalToolError(
                f"Cannot exec {self.tmux_command}: {_describe(e)}"
            ) from e
