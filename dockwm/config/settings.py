"""
dockwm.config.settings - Default values for the docking engine and shell.

Values are plain module constants; a few can be overridden through
environment variables:
    DOCKWM_HOME       Directory where the workspace collection is stored.
    DOCKWM_LOG_LEVEL  Root logging level for ``python -m dockwm``.
"""

from __future__ import annotations

import os
from pathlib import Path

# === Split ratios ===
MIN_RATIO = 0.1
MAX_RATIO = 0.9
DEFAULT_RATIO = 0.5

# === Magnetic docking ===
DEFAULT_MAGNETIC_THRESHOLD = 24  # max edge gap (units) that still snaps

# === Shell ===
DEFAULT_SURFACE_WIDTH = 1280
DEFAULT_SURFACE_HEIGHT = 800
SHELL_PROMPT = "workspace> "

# === Virtual controller ===
DEFAULT_WINDOW_BOUNDS = (0, 0, 640, 480)  # x, y, width, height

# === Persistence ===
PERSIST_DIR = Path(os.environ.get("DOCKWM_HOME", Path.home() / ".dockwm"))
PERSIST_FILE = "workspaces.json"

# === Logging ===
LOG_LEVEL = os.environ.get("DOCKWM_LOG_LEVEL", "WARNING").upper()
