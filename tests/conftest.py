"""Root pytest configuration for all tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from devmux.config.loader import reset_settings
from devmux.logging import reset_logging


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point HOME and XDG_CONFIG_HOME at a temp dir; clear devmux variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for var in (
        "DEVMUX_CONFIG",
        "DEVMUX_LOG",
        "DEVMUX_PROJECTS_ROOT",
        "DEVMUX_CONNECT_TIMEOUT",
        "PUB_KEY_PATH",
        "TMUX",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    reset_logging()
    yield home
    reset_settings()
    reset_logging()


@pytest.fixture
def home(isolated_env: Path) -> Path:
    return isolated_env
