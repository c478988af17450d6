"""Host/tool inventory resolution.

The inventory lives in a shell-variable style file so it stays readable by
the shell scripts and completions that share it::

    HOSTS=("home" "work")
    HOST_home_SSH="home-pc"
    HOST_work_SSH="me@work-box"
    HOST_work_WSL_PREFIX="wsl.exe -d Ubuntu -- bash -lc"
    HOST_work_OS="windows-wsl"
    TOOLS=("claude" "shell")
    TOOL_claude_CMD="claude"
    TOOL_shell_CMD=""

Values are read with python-dotenv; bash arrays are folded onto one line and
split with shlex. The result is an immutable Inventory built once and passed
to every downstream component.
"""

from __future__ import annotations

import io
import re
import shlex
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import dotenv_values

from devmux.config.paths import get_inventory_path, get_machines_path
from devmux.config.schema import Host, Inventory, Machine, OSClass, Tool
from devmux.errors import (
    ConfigInvalidError,
    ConfigMissingError,
    RemoteExecutionError,
)
from devmux.logging import get_logger

if TYPE_CHECKING:
    from devmux.remote import Channel

log = get_logger("config")

ConfValue = str | list[str]

_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_ARRAY_START_RE = re.compile(r"^\s*(?:export\s+)?(?P<name>[A-Za-z_][A-Za-z0-9_]*)=\(")

DEFAULT_TOOL = Tool(key="shell", command="")


def _strip_comment(line: str) -> str:
    """Drop a trailing ``# comment`` that is not inside quotes."""
    quote = None
    for i, ch in enumerate(line):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "#" and (i == 0 or line[i - 1].isspace()):
            return line[:i].rstrip()
    return line


def _fold_arrays(text: str) -> tuple[str, set[str]]:
    """Join multi-line ``NAME=( ... )`` arrays onto a single line.

    Comments inside the array are dropped; dotenv would otherwise cut the
    folded line at the first one. Also returns the names assigned with an
    unquoted ``=(``, the only values that are arrays.
    """
    out: list[str] = []
    arrays: set[str] = set()
    pending: list[str] | None = None
    for line in text.splitlines():
        if pending is not None:
            stripped = _strip_comment(line.strip())
            if stripped:
                pending.append(stripped)
            if ")" in stripped:
                out.append(" ".join(pending))
                pending = None
            continue
        match = _ARRAY_START_RE.match(line)
        if match:
            arrays.add(match.group("name"))
            if ")" not in _strip_comment(line):
                pending = [_strip_comment(line.rstrip())]
                continue
        out.append(line)
    if pending is not None:
        # Unterminated array: keep what we have and let validation complain
        out.append(" ".join(pending) + ")")
    return "\n".join(out) + "\n", arrays


def _parse_value(raw: str | None, is_array: bool = False) -> ConfValue:
    if raw is None:
        return ""
    value = raw.strip()
    if is_array and value.startswith("(") and value.endswith(")"):
        try:
            return shlex.split(value[1:-1], comments=True)
        except ValueError as e:
            raise ConfigInvalidError(f"Malformed array {value!r}: {e}") from None
    return raw


def parse_conf(text: str) -> dict[str, ConfValue]:
    """Parse shell-variable style config text into scalars and lists."""
    folded, arrays = _fold_arrays(text)
    values = dotenv_values(stream=io.StringIO(folded), interpolate=False)
    return {key: _parse_value(raw, key in arrays) for key, raw in values.items()}


def _var(key: str) -> str:
    return key.replace("-", "_")


def _scalar(data: dict[str, ConfValue], name: str) -> str:
    value = data.get(name, "")
    if isinstance(value, list):
        raise ConfigInvalidError(f"{name} must be a string, not an array")
    return value


def _array(data: dict[str, ConfValue], name: str) -> list[str] | None:
    if name not in data:
        return None
    value = data[name]
    if isinstance(value, str):
        # A bare scalar is a one-element list, matching bash semantics
        return [value] if value else []
    return value


def _os_class(value: str, owner: str) -> OSClass:
    if not value:
        return OSClass.LINUX
    try:
        return OSClass(value)
    except ValueError:
        allowed = "|".join(o.value for o in OSClass)
        raise ConfigInvalidError(f"{owner}: OS must be one of {allowed}, got '{value}'") from None


def _check_key(kind: str, key: str) -> None:
    if not _KEY_RE.match(key):
        raise ConfigInvalidError(f"Invalid {kind} key '{key}'")


def build_inventory(data: dict[str, ConfValue], source: str = "") -> Inventory:
    """Validate parsed config values and build the Inventory."""
    host_keys = _array(data, "HOSTS")
    if not host_keys:
        raise ConfigInvalidError(f"HOSTS is empty or missing in {source or 'config'}")

    hosts: dict[str, Host] = {}
    for key in host_keys:
        _check_key("host", key)
        prefix = f"HOST_{_var(key)}"
        target = _scalar(data, f"{prefix}_SSH").strip()
        if not target:
            raise ConfigInvalidError(f"{key}: {prefix}_SSH not set")
        hosts[key] = Host(
            key=key,
            ssh_target=target,
            shell_prefix=_scalar(data, f"{prefix}_WSL_PREFIX").strip(),
            os=_os_class(_scalar(data, f"{prefix}_OS").strip(), key),
        )

    tool_keys = _array(data, "TOOLS")
    tools: dict[str, Tool] = {}
    if tool_keys is None:
        tools[DEFAULT_TOOL.key] = DEFAULT_TOOL
    for key in tool_keys or []:
        _check_key("tool", key)
        tools[key] = Tool(key=key, command=_scalar(data, f"TOOL_{_var(key)}_CMD").strip())

    if not tools:
        raise ConfigInvalidError(f"TOOLS is empty in {source or 'config'}")

    return Inventory(hosts=hosts, tools=tools, source=source)


def load_inventory(path: str | Path | None = None) -> Inventory:
    """Load and validate the inventory.

    Raises:
        ConfigMissingError: The file does not exist.
        ConfigInvalidError: A listed host lacks a required field, or a value
            is malformed.
    """
    conf_path = Path(path).expanduser() if path else get_inventory_path()
    if not conf_path.is_file():
        raise ConfigMissingError(str(conf_path))

    text = conf_path.read_text(encoding="utf-8")
    inventory = build_inventory(parse_conf(text), source=str(conf_path))
    log.debug(
        "Loaded %d host(s), %d tool(s) from %s",
        len(inventory.hosts), len(inventory.tools), conf_path,
    )
    return inventory


resolve = load_inventory


def load_machines(path: str | Path | None = None) -> list[Machine]:
    """Load machines.conf (MACHINES array plus MACHINE_<key>_* fields)."""
    conf_path = Path(path).expanduser() if path else get_machines_path()
    if not conf_path.is_file():
        raise ConfigMissingError(str(conf_path))

    data = parse_conf(conf_path.read_text(encoding="utf-8"))
    machines: list[Machine] = []
    for key in _array(data, "MACHINES") or []:
        _check_key("machine", key)
        prefix = f"MACHINE_{_var(key)}"
        machines.append(
            Machine(
                key=key,
                address=_scalar(data, f"{prefix}_TAILSCALE_IP").strip(),
                os=_os_class(_scalar(data, f"{prefix}_OS").strip(), key),
                win_user=_scalar(data, f"{prefix}_WIN_USER").strip(),
                wsl_user=_scalar(data, f"{prefix}_WSL_USER").strip(),
            )
        )
    return machines


def list_projects(channel: Channel, root: str | None = None) -> list[str]:
    """List project directories on the channel's host.

    Always issues a fresh remote listing: client and host filesystems are
    independent and may change between runs.
    """
    result = channel.list_projects(root)
    if not result.success:
        raise RemoteExecutionError(
            f"Could not list projects on {channel.label}: {result.error.strip() or result.output.strip() or result.status}"
        )
    return [line.strip() for line in result.output.splitlines() if line.strip()]
