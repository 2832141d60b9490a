"""Configuration for the notevault backend.

All settings come from environment variables with development defaults.
Modules that build stores read these at import time; tests override them
with ``monkeypatch.setenv`` and reload ``notevault.config`` and
``notevault.api.deps``.
"""

import os
from pathlib import Path

# Data directory: repository_root/data (we are in backend/notevault/)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DATA_DIR = Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


# Note locking. The minimum PIN length can be raised but never below 4.
PIN_LENGTH_FLOOR = 4
PIN_MIN_LENGTH = max(PIN_LENGTH_FLOOR, _int_env("PIN_MIN_LENGTH", PIN_LENGTH_FLOOR))
LOCKED_PLACEHOLDER = os.getenv("LOCKED_PLACEHOLDER", "This note is locked.")

# Sharing. Fixed, not configurable.
MAX_COLLABORATORS = 2
DEFAULT_COLLABORATOR_ROLE = "editor"
