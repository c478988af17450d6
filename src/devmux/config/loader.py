"""Settings file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Settings caching with reset support
- Conversion from dict to the typed Settings dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from devmux.config.merge import merge_settings
from devmux.config.paths import get_settings_paths
from devmux.config.schema import (
    LoggingConfig,
    MultiplexerConfig,
    RemoteConfig,
    Settings,
    SSHConfig,
)

_log = logging.getLogger("devmux.config")

_cached_settings: Settings | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build a settings dict from environment variables (highest priority)."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("DEVMUX_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    root = os.environ.get("DEVMUX_PROJECTS_ROOT")
    if root:
        overrides.setdefault("remote", {})["projects_root"] = root

    timeout = os.environ.get("DEVMUX_CONNECT_TIMEOUT")
    if timeout:
        try:
            overrides.setdefault("ssh", {})["connect_timeout"] = int(timeout)
        except ValueError:
            _log.warning("Ignoring non-integer DEVMUX_CONNECT_TIMEOUT=%r", timeout)

    return overrides


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def dict_to_settings(data: dict[str, Any]) -> Settings:
    """Convert a merged dict to the typed Settings dataclass."""
    log_data = _section(data, "logging")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        file=log_data.get("file"),
    )

    ssh_data = _section(data, "ssh")
    extra = ssh_data.get("extra_options", [])
    ssh = SSHConfig(
        binary=ssh_data.get("binary", "ssh"),
        connect_timeout=int(ssh_data.get("connect_timeout", 5)),
        extra_options=[str(o) for o in extra] if isinstance(extra, list) else [],
    )

    remote_data = _section(data, "remote")
    remote = RemoteConfig(
        command=remote_data.get("command", "devmux-remote"),
        projects_root=remote_data.get("projects_root", "~/projects"),
    )

    mux_data = _section(data, "multiplexer")
    multiplexer = MultiplexerConfig(binary=mux_data.get("binary", "tmux"))

    return Settings(
        logging=logging_config,
        ssh=ssh,
        remote=remote,
        multiplexer=multiplexer,
    )


def load_settings(paths: list[Path] | None = None, reload: bool = False) -> Settings:
    """Load and merge settings from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. User settings ($XDG_CONFIG_HOME/devmux/settings.yaml)
    3. System settings (/etc/devmux/settings.yaml)

    Args:
        paths: Explicit settings files, lowest priority first. Defaults to
            the system and user locations. Explicit paths bypass the cache.
        reload: Force reload even if cached.
    """
    global _cached_settings

    if _cached_settings is not None and not reload and paths is None:
        return _cached_settings

    layers: list[dict[str, Any]] = []
    for path in paths if paths is not None else get_settings_paths():
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded settings from %s", path)
            layers.append(data)

    env_layer = env_overrides()
    if env_layer:
        layers.append(env_layer)

    settings = dict_to_settings(merge_settings(*layers))

    if paths is None:
        _cached_settings = settings

    return settings


def get_settings() -> Settings:
    """Get the cached settings, loading them on first use."""
    if _cached_settings is None:
        return load_settings()
    return _cached_settings


def reset_settings() -> None:
    """Reset cached settings (tests, or forcing a reload)."""
    global _cached_settings
    _cached_settings = None
