"""Platform-aware configuration path resolution.

Handles file locations for:
- Inventory: $XDG_CONFIG_HOME/devmux/devmux.conf (or ~/.config/devmux/)
- Settings: /etc/devmux/settings.yaml (system), user config dir (user)
- Machines: machines.conf next to the inventory
"""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "devmux"
INVENTORY_FILENAME = "devmux.conf"
SETTINGS_FILENAME = "settings.yaml"
MACHINES_FILENAME = "machines.conf"


def get_config_dir() -> Path:
    """Get the user config directory (may not exist)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_inventory_path() -> Path:
    """Get the inventory path, honouring DEVMUX_CONFIG."""
    override = os.environ.get("DEVMUX_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / INVENTORY_FILENAME


def get_machines_path() -> Path:
    return get_config_dir() / MACHINES_FILENAME


def get_system_settings_path() -> Path:
    return Path("/etc") / APP_NAME / SETTINGS_FILENAME


def get_user_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


def get_settings_paths() -> list[Path]:
    """Get all settings paths in priority order (lowest to highest).

    Later paths override earlier ones when merging.
    """
    return [get_system_settings_path(), get_user_settings_path()]
