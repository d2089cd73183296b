"""Hook settings — reads settings.toml + .env to produce HookSettings.

Every key is optional; a missing settings.toml means all defaults. The
``VSCMUX_SESSION`` environment variable (from the shell or the config
dir .env file) overrides the base session name.

Key entities:
  - HookSettings: frozen dataclass with the resolved configuration.
  - load_settings(): parse .env + settings.toml → HookSettings.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

from .slug import DEFAULT_FALLBACK, sanitize_name
from .utils import vscmux_dir

logger = logging.getLogger(__name__)

SESSION_ENV_VAR = "VSCMUX_SESSION"


def session_name_from(raw: str) -> str:
    """Sanitize a base session name.

    tmux rewrites ``.`` and ``:`` in session names, so ``.`` is folded too
    or later lookups by the original name would miss.
    """
    return sanitize_name(raw, DEFAULT_FALLBACK).replace(".", "_")


@dataclass(frozen=True)
class HookSettings:
    """Resolved configuration for the hook and the installer."""

    # Tmux
    session_name: str = "vscode"
    option_key: str = "@vscode_root"
    tmux_command: str = "tmux"
    fallback_slug: str = DEFAULT_FALLBACK

    # Guard
    term_program: str = "vscode"

    # Dotfiles touched by `vscmux install`
    bashrc_path: Path = field(default_factory=lambda: Path.home() / ".bashrc")
    tmux_conf_path: Path = field(default_factory=lambda: Path.home() / ".tmux.conf")
    fish_config_path: Path = field(
        default_factory=lambda: Path.home() / ".config" / "fish" / "config.fish"
    )

    config_dir: Path = field(default_factory=lambda: vscmux_dir())

    def with_session(self, raw_name: str) -> HookSettings:
        """Copy with a different (sanitized) base session name."""
        return replace(self, session_name=session_name_from(raw_name))


# Keys accepted in the [hook] table of settings.toml
_STR_KEYS = ("session_name", "option_key", "tmux_command", "fallback_slug", "term_program")
_PATH_KEYS = ("bashrc_path", "tmux_conf_path", "fish_config_path")


def load_settings(config_dir: Path | None = None) -> HookSettings:
    """Read .env + settings.toml and return HookSettings.

    Args:
        config_dir: Override for the config directory.
                    Defaults to ``vscmux_dir()``.

    Raises:
        ValueError: settings.toml exists but is malformed.
    """
    if config_dir is None:
        config_dir = vscmux_dir()

    # Only the config dir .env; the hook runs in whatever directory a
    # workspace opens, which may be an untrusted checkout.
    env_file = config_dir / ".env"
    if env_file.is_file():
        load_dotenv(env_file)

    raw: dict = {}
    toml_path = config_dir / "settings.toml"
    if toml_path.is_file():
        try:
            with open(toml_path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid {toml_path}: {e}") from e

    hook_section = raw.get("hook", {})
    if not isinstance(hook_section, dict):
        raise ValueError(f"{toml_path}: [hook] must be a table")

    kwargs: dict = {"config_dir": config_dir}
    for key in _STR_KEYS:
        if key in hook_section:
            kwargs[key] = str(hook_section[key])
    for key in _PATH_KEYS:
        if key in hook_section:
            kwargs[key] = Path(os.path.expanduser(str(hook_section[key])))

    env_session = os.getenv(SESSION_ENV_VAR, "")
    if env_session:
        kwargs["session_name"] = env_session

    kwargs["session_name"] = session_name_from(kwargs.get("session_name", "vscode"))
    kwargs["fallback_slug"] = sanitize_name(
        kwargs.get("fallback_slug", DEFAULT_FALLBACK), DEFAULT_FALLBACK
    )
    option_key = kwargs.get("option_key", "@vscode_root")
    if not option_key.startswith("@"):
        raise ValueError(f"option_key must start with '@', got {option_key!r}")

    settings = HookSettings(**kwargs)
    logger.debug("Loaded settings: %s", settings)
    return settings
