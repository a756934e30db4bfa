"""Portable path resolution for both dev and PyInstaller-frozen environments.

All path resolution in postureangle should go through the helpers in this
module so that the application works the same when bundled as a standalone
exe via PyInstaller (onedir mode).
"""

from __future__ import annotations

import sys
from pathlib import Path


def is_frozen() -> bool:
    """Return ``True`` when running inside a PyInstaller bundle."""
    return getattr(sys, "frozen", False) is True


def get_base_dir() -> Path:
    """Return the base directory used for resolving relative paths.

    * **Frozen (PyInstaller)**: the directory containing the exe.
    * **Development**: the project root (two levels up from this file,
      i.e. ``src/postureangle/`` -> project root).
    """
    if is_frozen():
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent.parent.parent


def get_config_dir() -> Path:
    """Return the directory holding ``settings.json`` and the Qt INI file."""
    return get_base_dir() / "config"


def get_settings_path() -> Path:
    return get_config_dir() / "settings.json"
