"""vscmux - persistent tmux windows for VS Code integrated terminals.

Every VS Code terminal on the host reconnects to a tmux window keyed by its
workspace path instead of starting a bare shell. Each terminal gets its own
grouped client session so focus stays independent while the window set is
shared.

Package entry point. Exports the version string only; functional modules
are imported lazily by main.py so the login-shell hook starts fast.
"""

__version__ = "0.1.0"
