"""Tests for the settings module."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from devmux.config import get_settings, load_settings, reset_settings
from devmux.config.loader import dict_to_settings, load_yaml_file
from devmux.config.merge import deep_merge, merge_settings
from devmux.config.paths import (
    get_inventory_path,
    get_settings_paths,
    get_system_settings_path,
    get_user_settings_path,
)
from devmux.config.schema import LoggingConfig
from devmux.logging import TRACE, VERBOSE, level_for


class TestDeepMerge:
    """Test the deep merge algorithm."""

    def test_simple_override(self) -> None:
        """Test that override values replace base values."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        """Test that nested dicts are recursively merged."""
        result = deep_merge(
            {"ssh": {"binary": "ssh", "connect_timeout": 5}},
            {"ssh": {"connect_timeout": 2}},
        )
        assert result == {"ssh": {"binary": "ssh", "connect_timeout": 2}}

    def test_none_does_not_override(self) -> None:
        """Test that None values in override don't replace base values."""
        assert deep_merge({"a": 1}, {"a": None}) == {"a": 1}

    def test_list_replaced_not_merged(self) -> None:
        """Test that lists are replaced, not concatenated."""
        assert deep_merge({"items": [1, 2, 3]}, {"items": [4]}) == {"items": [4]}

    def test_merge_settings_multiple(self) -> None:
        """Test merging multiple layers in order."""
        assert merge_settings({"a": 1, "b": 2}, {"b": 3}, {}, {"c": 4}) == {"a": 1, "b": 3, "c": 4}


class TestPaths:
    """Test config path resolution."""

    def test_xdg_config_home(self, home: Path) -> None:
        assert get_inventory_path() == home / ".config" / "devmux" / "devmux.conf"
        assert get_user_settings_path() == home / ".config" / "devmux" / "settings.yaml"

    def test_fallback_without_xdg(self, home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME")
        assert get_inventory_path() == home / ".config" / "devmux" / "devmux.conf"

    def test_devmux_config_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEVMUX_CONFIG", "/tmp/other.conf")
        assert get_inventory_path() == Path("/tmp/other.conf")

    def test_priority_order(self) -> None:
        assert get_settings_paths() == [get_system_settings_path(), get_user_settings_path()]


class TestLoadSettings:
    """Test YAML loading, layering and environment overrides."""

    def test_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(paths=[tmp_path / "missing.yaml"])
        assert settings.ssh.binary == "ssh"
        assert settings.ssh.connect_timeout == 5
        assert settings.remote.command == "devmux-remote"
        assert settings.remote.projects_root == "~/projects"
        assert settings.multiplexer.binary == "tmux"

    def test_layers_merge(self, tmp_path: Path) -> None:
        system = tmp_path / "system.yaml"
        system.write_text("ssh:\n  connect_timeout: 10\n  extra_options: ['-4']\n")
        user = tmp_path / "user.yaml"
        user.write_text("ssh:\n  connect_timeout: 3\nremote:\n  projects_root: ~/src\n")
        settings = load_settings(paths=[system, user])
        assert settings.ssh.connect_timeout == 3
        assert settings.ssh.extra_options == ["-4"]
        assert settings.remote.projects_root == "~/src"

    def test_env_overrides_files(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        user = tmp_path / "user.yaml"
        user.write_text("remote:\n  projects_root: ~/src\n")
        monkeypatch.setenv("DEVMUX_PROJECTS_ROOT", "/work")
        monkeypatch.setenv("DEVMUX_CONNECT_TIMEOUT", "9")
        monkeypatch.setenv("DEVMUX_LOG", "/tmp/devmux.log")
        settings = load_settings(paths=[user])
        assert settings.remote.projects_root == "/work"
        assert settings.ssh.connect_timeout == 9
        assert settings.logging.file == "/tmp/devmux.log"

    def test_bad_timeout_env_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEVMUX_CONNECT_TIMEOUT", "soon")
        assert load_settings(paths=[]).ssh.connect_timeout == 5

    def test_invalid_yaml_ignored(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("ssh: [unclosed\n")
        assert load_yaml_file(bad) == {}

    def test_non_mapping_yaml_ignored(self, tmp_path: Path) -> None:
        listing = tmp_path / "list.yaml"
        listing.write_text("- a\n- b\n")
        assert load_yaml_file(listing) == {}

    def test_wrong_section_type_uses_defaults(self) -> None:
        assert dict_to_settings({"ssh": "fast"}).ssh.binary == "ssh"

    def test_user_file_from_xdg(self, home: Path) -> None:
        path = home / ".config" / "devmux" / "settings.yaml"
        path.parent.mkdir(parents=True)
        path.write_text("multiplexer:\n  binary: /opt/tmux\n")
        assert get_settings().multiplexer.binary == "/opt/tmux"

    def test_cached_until_reset(self, home: Path) -> None:
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first


class TestLogLevel:
    """Test log level resolution."""

    def test_default_is_warning(self) -> None:
        assert level_for(None) == logging.WARNING

    def test_config_level(self) -> None:
        assert level_for(LoggingConfig(level="debug")) == logging.DEBUG

    def test_verbosity_wins(self) -> None:
        config = LoggingConfig(level="error")
        assert level_for(config, 1) == logging.INFO
        assert level_for(config, 2) == VERBOSE
        assert level_for(config, 9) == TRACE
