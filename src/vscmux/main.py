"""Application entry point — CLI dispatcher.

Handles two commands:
  1. `vscmux hook [--session NAME]` — delegates to hook.hook_main(); run from
     ~/.bashrc inside VS Code terminals.
  2. `vscmux install [--session-name NAME] [--skip-packages]` — writes the
     bashrc auto-attach block and tmux/fish defaults.
"""

import logging
import sys

USAGE = """\
Usage: vscmux <command> [options]

Commands:
  hook [--session NAME]     Attach this VS Code terminal to its workspace window
  install [options]         Wire ~/.bashrc and ~/.tmux.conf for auto-attach

Install options:
  --session-name NAME  Base tmux session name to use (default: vscode)
  --skip-packages      Accepted for compatibility; packages are not installed
  -h, --help           Show this help message and exit
"""


def _install(args: list[str]) -> int:
    from .installer import install
    from .settings import load_settings

    session_name: str | None = None
    skip_packages = False
    it = iter(args)
    for arg in it:
        if arg == "--session-name":
            session_name = next(it, None)
            if session_name is None:
                print("Error: --session-name requires a value", file=sys.stderr)
                return 1
        elif arg in ("--skip-packages", "--no-packages"):
            skip_packages = True
        elif arg in ("-h", "--help"):
            print(USAGE, end="")
            return 0
        else:
            print(f"Error: Unknown option: {arg}", file=sys.stderr)
            print(USAGE, end="", file=sys.stderr)
            return 1

    logging.getLogger("vscmux").setLevel(logging.INFO)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if session_name is not None:
        settings = settings.with_session(session_name)

    if skip_packages:
        logger.info("Skipping package installation per user request")
    else:
        logger.info("Package installation is not managed here; ensure tmux exists")

    try:
        touched = install(settings)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for path in touched:
        print(f"Updated {path}")
    print(
        "Setup complete. Reload your shell or open a new VS Code terminal "
        "to use the configuration."
    )
    return 0


def main() -> None:
    """Main entry point."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
    )

    command = sys.argv[1] if len(sys.argv) > 1 else ""

    if command == "hook":
        from .hook import hook_main

        sys.exit(hook_main(sys.argv[2:]))

    if command == "install":
        sys.exit(_install(sys.argv[2:]))

    if command in ("-h", "--help"):
        print(USAGE, end="")
        return

    print(USAGE, end="", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
