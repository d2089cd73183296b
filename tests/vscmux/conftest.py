"""In-memory stand-in for TmuxManager.

Models just enough tmux: sessions grouped onto a shared window list, a
per-session current window, window user options, and recorded input.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from vscmux.tmux_manager import SpawnError, WindowAttributeError, WindowRef


@dataclass
class FakeWindow:
    window_id: str
    name: str
    start_dir: str
    options: dict[str, str] = field(default_factory=dict)

    @property
    def ref(self) -> WindowRef:
        return WindowRef(window_name=self.name, window_id=self.window_id)


@dataclass
class FakeSession:
    name: str
    group: str
    current: str = ""


class FakeTmux:
    def __init__(self) -> None:
        self.sessions: dict[str, FakeSession] = {}
        self.groups: dict[str, list[FakeWindow]] = {}
        self.literal: list[tuple[str, str, str]] = []
        self.keys: list[tuple[str, str, tuple[str, ...]]] = []
        self.attached: list[str] = []
        self.fail_tagging = False
        self._next_id = 0

    # -- helpers ---------------------------------------------------------

    def _new_window(self, name: str, start_dir: str) -> FakeWindow:
        window = FakeWindow(f"@{self._next_id}", name, start_dir)
        self._next_id += 1
        return window

    def _windows(self, session: str) -> list[FakeWindow]:
        return self.groups[self.sessions[session].group]

    def _find(self, session: str, window: WindowRef | str) -> FakeWindow | None:
        if session not in self.sessions:
            return None
        if isinstance(window, WindowRef):
            key = window.window_id or window.window_name
        else:
            key = window
        for w in self._windows(session):
            if key in (w.window_id, w.name):
                return w
        return None

    def current_window(self, session: str) -> str:
        window = self._find(session, self.sessions[session].current)
        assert window is not None
        return window.name

    # -- TmuxManager surface -------------------------------------------

    def session_exists(self, name: str) -> bool:
        return name in self.sessions

    def create_session(
        self, name: str, start_dir: str, initial_window_name: str
    ) -> WindowRef:
        if name in self.sessions:
            raise SpawnError(f"duplicate session: {name}")
        window = self._new_window(initial_window_name, start_dir)
        self.groups[name] = [window]
        self.sessions[name] = FakeSession(name, group=name, current=window.window_id)
        return window.ref

    def create_grouped_session(self, name: str, base_session: str) -> None:
        if name in self.sessions or base_session not in self.sessions:
            raise SpawnError(f"cannot create {name}")
        base = self.sessions[base_session]
        self.sessions[name] = FakeSession(name, group=base.group, current=base.current)

    def list_windows(self, session: str) -> list[WindowRef]:
        if session not in self.sessions:
            return []
        return [w.ref for w in self._windows(session)]

    def list_window_names(self, session: str) -> list[str]:
        return [w.window_name for w in self.list_windows(session)]

    def create_window(self, session: str, name: str, start_dir: str) -> WindowRef:
        if session not in self.sessions:
            raise SpawnError(f"no session {session}")
        window = self._new_window(name, start_dir)
        self._windows(session).append(window)
        return window.ref

    def select_window(self, session: str, window: WindowRef | str) -> None:
        found = self._find(session, window)
        if found is None:
            raise SpawnError(f"no window {window}")
        self.sessions[session].current = found.window_id

    def get_window_attribute(
        self, session: str, window: WindowRef | str, key: str
    ) -> str | None:
        found = self._find(session, window)
        if found is None:
            return None
        return found.options.get(key)

    def set_window_attribute(
        self, session: str, window: WindowRef | str, key: str, value: str
    ) -> None:
        found = self._find(session, window)
        if found is None or self.fail_tagging:
            raise WindowAttributeError(f"cannot tag {window}")
        found.options[key] = value

    def send_keys(self, session: str, window: WindowRef | str, *keys: str) -> None:
        self.keys.append((session, str(window), keys))

    def send_literal(
        self, session: str, window: WindowRef | str, text: str, enter: bool = True
    ) -> None:
        self.literal.append((session, self._find(session, window).name, text))
        if enter:
            self.keys.append((session, str(window), ("Enter",)))

    def attach(self, session: str) -> None:
        self.attached.append(session)


@pytest.fixture
def fake_tmux() -> FakeTmux:
    return FakeTmux()
