"""Shared helpers: config directory resolution and atomic file writes."""

import os
import tempfile
from pathlib import Path

_ENV_DIR = "VSCMUX_DIR"


def vscmux_dir() -> Path:
    """Return the vscmux config directory.

    ``VSCMUX_DIR`` wins when set; otherwise ``~/.vscmux``.
    """
    raw = os.environ.get(_ENV_DIR, "")
    if raw:
        return Path(os.path.expanduser(raw))
    return Path.home() / ".vscmux"


def atomic_write_text(path: Path, content: str) -> None:
    """Write text to ``path`` via a temp file in the same dir + os.replace.

    Parent directories are created as needed. Readers never observe a
    partially written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
