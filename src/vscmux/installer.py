"""Dotfile wiring for `vscmux install`.

Writes three things, each safe to re-run:
  - ~/.bashrc: the auto-attach block that runs `vscmux hook`.
  - ~/.tmux.conf: fish as tmux's default shell (only when fish is installed).
  - ~/.config/fish/config.fish: a stub, only when the file does not exist.

Key function: install().
"""

from __future__ import annotations

import logging
import shlex
import shutil
from collections.abc import Callable
from pathlib import Path

from .config_block import upsert_block
from .settings import HookSettings

logger = logging.getLogger(__name__)

BASHRC_START = "# >>> vscmux tmux auto-attach >>>"
BASHRC_END = "# <<< vscmux tmux auto-attach <<<"
TMUX_CONF_START = "# >>> vscmux tmux defaults >>>"
TMUX_CONF_END = "# <<< vscmux tmux defaults <<<"

_FISH_CONFIG_STUB = """\
if status is-interactive
    # Place interactive fish configuration here.
end
"""


def render_bashrc_block(
    session_name: str,
    vscmux_command: str = "vscmux",
    term_program: str = "vscode",
) -> str:
    """Body of the ~/.bashrc auto-attach block (markers excluded).

    The cheap shell-side checks mirror the hook's guard so plain terminals
    never pay for a Python start-up. The shell exits only when the hook
    succeeds (tmux attached and later exited cleanly); any failure status,
    including a crashed interpreter, leaves a plain shell.
    """
    cmd = shlex.quote(vscmux_command)
    return f"""\
if [ -z "${{TMUX:-}}" ] && [ -t 1 ] && [ "${{TERM_PROGRAM:-}}" = {shlex.quote(term_program)} ]; then
    if command -v {cmd} >/dev/null 2>&1 && command -v tmux >/dev/null 2>&1; then
        {cmd} hook --session {shlex.quote(session_name)} && exit
    fi
fi
"""


def render_tmux_conf_block(fish_path: str) -> str:
    return (
        f"set -g default-shell {fish_path}\n"
        f'set -g default-command "{fish_path} -l"\n'
    )


def install(
    settings: HookSettings,
    which: Callable[[str], str | None] | None = None,
) -> list[Path]:
    """Write the bashrc hook, tmux defaults and fish stub.

    Returns:
        Paths that were created or updated.
    """
    if which is None:
        which = shutil.which
    touched: list[Path] = []
    logger.info("Using tmux base session name: %s", settings.session_name)

    vscmux_command = which("vscmux") or "vscmux"
    upsert_block(
        settings.bashrc_path,
        BASHRC_START,
        BASHRC_END,
        render_bashrc_block(
            settings.session_name, vscmux_command, settings.term_program
        ),
    )
    touched.append(settings.bashrc_path)

    fish_path = which("fish")
    if not fish_path:
        logger.info("fish not found; leaving tmux default shell unchanged")
        return touched

    upsert_block(
        settings.tmux_conf_path,
        TMUX_CONF_START,
        TMUX_CONF_END,
        render_tmux_conf_block(fish_path),
    )
    touched.append(settings.tmux_conf_path)

    fish_config = settings.fish_config_path
    if not fish_config.exists():
        fish_config.parent.mkdir(parents=True, exist_ok=True)
        fish_config.write_text(_FISH_CONFIG_STUB, encoding="utf-8")
        logger.info("Created default %s", fish_config)
        touched.append(fish_config)

    return touched
