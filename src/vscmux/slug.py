"""Window/session name sanitizing.

tmux names double as command targets, so anything outside
``[A-Za-z0-9._-]`` is folded into ``_`` before it reaches tmux.
"""

import re

DEFAULT_FALLBACK = "vscode"

# Each maximal run of disallowed characters becomes one underscore
_UNSAFE_RUN_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_name(value: str, fallback: str = DEFAULT_FALLBACK) -> str:
    """Turn an arbitrary string into a safe, non-empty identifier.

    >>> sanitize_name("my project!!")
    'my_project_'
    >>> sanitize_name("")
    'vscode'
    """
    name = _UNSAFE_RUN_RE.sub("_", value)
    return name or fallback


def window_slug(workspace_path: str, fallback: str = DEFAULT_FALLBACK) -> str:
    """Readable window name derived from the last segment of a workspace path.

    Paths ending in ``/`` have an empty last segment and map to ``fallback``.
    """
    segment = workspace_path.rsplit("/", 1)[-1]
    return sanitize_name(segment, fallback)
