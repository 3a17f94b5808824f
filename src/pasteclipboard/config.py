"""PasteClipboard configuration — paths, defaults and typing constants."""

import os
from pathlib import Path

APP_ID = "com.example.PasteClipboard"
APP_NAME = "PasteClipboard"

# ── XDG-style paths ──────────────────────────────────────────────────────────

CONFIG_FILENAME = "config.ini"
CONFIG_SECTION = "settings"


def config_dir() -> Path:
    """Per-user config directory, honouring $XDG_CONFIG_HOME."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config) if xdg_config else Path.home() / ".config"
    return base / APP_NAME


def config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


# ── Settings defaults ────────────────────────────────────────────────────────

DEFAULT_TEXT = ""
DEFAULT_DELAY = 3         # seconds
MAX_DELAY = 86400         # one day

# ── Typing ───────────────────────────────────────────────────────────────────

KEY_DELAY_MS = 20          # pause between keystrokes
UINPUT_SETTLE_MS = 200     # let the compositor pick up the virtual device
UINPUT_DEVICE_NAME = "PasteClipboard-Virtual-Keyboard"
BACKEND_ENV = "PASTECLIPBOARD_BACKEND"
