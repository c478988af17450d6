"""Public key display for pasting into another machine's authorized keys."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from devmux.errors import DevmuxError
from devmux.terminal import CommandRunner, SubprocessRunner

DEFAULT_PUBLIC_KEY = "~/.ssh/id_ed25519.pub"


def public_key_path(path: str | Path | None = None) -> Path:
    """Explicit path, else $PUB_KEY_PATH, else the ed25519 default."""
    chosen = path or os.environ.get("PUB_KEY_PATH") or DEFAULT_PUBLIC_KEY
    return Path(chosen).expanduser()


def read_public_key(path: str | Path | None = None) -> str:
    """Read the key with all whitespace runs collapsed to single spaces."""
    key_path = public_key_path(path)
    try:
        raw = key_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DevmuxError(f"Public key not found: {key_path}") from None
    except OSError as e:
        raise DevmuxError(f"Cannot read {key_path}: {e}") from None
    return " ".join(raw.split())


def copy_to_windows_clipboard(key: str, runner: CommandRunner | None = None) -> bool:
    """Copy via clip.exe when running under WSL; False if unavailable."""
    if shutil.which("clip.exe") is None:
        return False
    result = (runner or SubprocessRunner()).run(["clip.exe"], input=key)
    return result.success
