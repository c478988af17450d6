"""Configuration management for devmux.

Two sources:
- The inventory (devmux.conf): hosts and tools, shell-variable style
- Settings: layered YAML (system, user) plus environment overrides

Example usage:
    from devmux.config import load_inventory, get_settings

    inventory = load_inventory()
    host = inventory.host("work")

    settings = get_settings()
    print(settings.ssh.connect_timeout)
"""

from devmux.config.inventory import (
    build_inventory,
    list_projects,
    load_inventory,
    load_machines,
    parse_conf,
    resolve,
)
from devmux.config.loader import (
    get_settings,
    load_settings,
    reset_settings,
)
from devmux.config.paths import (
    get_config_dir,
    get_inventory_path,
    get_machines_path,
    get_settings_paths,
)
from devmux.config.schema import (
    Host,
    Inventory,
    LoggingConfig,
    Machine,
    MultiplexerConfig,
    OSClass,
    RemoteConfig,
    Settings,
    SSHConfig,
    Tool,
)

__all__ = [
    # Inventory
    "Inventory",
    "Host",
    "Tool",
    "Machine",
    "OSClass",
    "load_inventory",
    "resolve",
    "parse_conf",
    "build_inventory",
    "load_machines",
    "list_projects",
    # Settings
    "Settings",
    "LoggingConfig",
    "SSHConfig",
    "RemoteConfig",
    "MultiplexerConfig",
    "load_settings",
    "get_settings",
    "reset_settings",
    # Path utilities
    "get_config_dir",
    "get_inventory_path",
    "get_machines_path",
    "get_settings_paths",
]
