"""Tests for attacher.py — grouped client sessions and attach ordering."""

import pytest

from vscmux.attacher import attach_terminal, client_session_name, prepare_client
from vscmux.resolver import WorkspaceResolver
from vscmux.tmux_manager import SpawnError


def test_client_session_name():
    assert client_session_name("vscode", 4242) == "vscode-client-4242"


class TestPrepareClient:
    def test_creates_grouped_session(self, fake_tmux):
        window = fake_tmux.create_session("vscode", "/a", "a")
        client = prepare_client(fake_tmux, "vscode", window, pid=10)

        assert client == "vscode-client-10"
        assert fake_tmux.sessions[client].group == "vscode"
        assert fake_tmux.current_window(client) == "a"

    def test_reuses_existing_client(self, fake_tmux):
        fake_tmux.create_session("vscode", "/a", "a")
        b = fake_tmux.create_window("vscode", "b", "/b")
        prepare_client(fake_tmux, "vscode", "a", pid=10)
        prepare_client(fake_tmux, "vscode", b, pid=10)

        assert [s for s in fake_tmux.sessions if s.startswith("vscode-client")] == [
            "vscode-client-10"
        ]
        assert fake_tmux.current_window("vscode-client-10") == "b"

    def test_defaults_to_own_pid(self, fake_tmux, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("vscmux.attacher.os.getpid", lambda: 77)
        fake_tmux.create_session("vscode", "/a", "a")
        assert prepare_client(fake_tmux, "vscode", "a") == "vscode-client-77"

    def test_missing_base_session_raises(self, fake_tmux):
        with pytest.raises(SpawnError):
            prepare_client(fake_tmux, "vscode", "a", pid=1)


class TestClientIsolation:
    def test_each_terminal_keeps_its_own_window(self, fake_tmux):
        resolver = WorkspaceResolver(fake_tmux)
        a = resolver.resolve("vscode", "/src/a").window
        b = resolver.resolve("vscode", "/src/b").window

        attach_terminal(fake_tmux, "vscode", a, pid=100)
        attach_terminal(fake_tmux, "vscode", b, pid=200)

        assert fake_tmux.current_window("vscode-client-100") == "a"
        assert fake_tmux.current_window("vscode-client-200") == "b"
        assert fake_tmux.current_window("vscode") == "a"
        for client in ("vscode-client-100", "vscode-client-200"):
            assert fake_tmux.list_window_names(client) == ["a", "b"]
        assert fake_tmux.list_window_names("vscode") == ["a", "b"]


class TestAttachTerminal:
    def test_attach_is_last_action(self, fake_tmux):
        window = fake_tmux.create_session("vscode", "/a", "a")
        attach_terminal(fake_tmux, "vscode", window, pid=5)
        assert fake_tmux.attached == ["vscode-client-5"]

    def test_no_attach_when_select_fails(self, fake_tmux):
        fake_tmux.create_session("vscode", "/a", "a")
        with pytest.raises(SpawnError):
            attach_terminal(fake_tmux, "vscode", "missing", pid=5)
        assert fake_tmux.attached == []
