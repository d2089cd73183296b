"""Root conftest — isolates VSCMUX_DIR before any vscmux module is imported.

settings.load_settings() reads settings.toml and .env from the config dir,
so tests must never see the developer's real ~/.vscmux.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["VSCMUX_DIR"] = tempfile.mkdtemp(prefix="vscmux-test-")
os.environ.pop("VSCMUX_SESSION", None)
