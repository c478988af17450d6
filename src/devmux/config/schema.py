"""Configuration schema dataclasses for devmux.

Two kinds of configuration exist:

- The inventory (hosts and tools) read from the shell-style devmux.conf.
  Its types are frozen: the resolver builds them once and every downstream
  component receives the same immutable mapping.
- Settings read from layered settings.yaml files. All fields have defaults
  so partial files merge together.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from devmux.errors import ConfigInvalidError

LOCAL_TARGETS = frozenset({"local", "localhost", "127.0.0.1", "::1"})


class OSClass(str, Enum):
    """Operating-system class of a host."""

    LINUX = "linux"
    TERMUX = "termux"
    WINDOWS_WSL = "windows-wsl"
    MACOS = "macos"


@dataclass(frozen=True)
class Host:
    """A remote development host.

    Attributes:
        key: Short identity used on the command line (e.g. "work").
        ssh_target: ssh alias or user@host; never empty.
        shell_prefix: Command that enters a nested environment (e.g. a WSL
            invocation) before project/tool commands run. Empty means the
            landing shell runs them directly.
        os: Operating-system class.
    """

    key: str
    ssh_target: str
    shell_prefix: str = ""
    os: OSClass = OSClass.LINUX

    @property
    def is_local(self) -> bool:
        return self.ssh_target in LOCAL_TARGETS


@dataclass(frozen=True)
class Tool:
    """A tool to run inside a session. An empty command means a plain shell."""

    key: str
    command: str = ""


@dataclass(frozen=True)
class Inventory:
    """Validated hosts and tools, in config order."""

    hosts: Mapping[str, Host]
    tools: Mapping[str, Tool]
    source: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "hosts", MappingProxyType(dict(self.hosts)))
        object.__setattr__(self, "tools", MappingProxyType(dict(self.tools)))

    @property
    def host_keys(self) -> list[str]:
        return list(self.hosts)

    @property
    def tool_keys(self) -> list[str]:
        return list(self.tools)

    def host(self, key: str) -> Host:
        try:
            return self.hosts[key]
        except KeyError:
            known = ", ".join(self.hosts) or "none"
            raise ConfigInvalidError(f"Unknown host '{key}' (known: {known})") from None

    def tool(self, key: str) -> Tool:
        try:
            return self.tools[key]
        except KeyError:
            known = ", ".join(self.tools) or "none"
            raise ConfigInvalidError(f"Unknown tool '{key}' (known: {known})") from None


@dataclass(frozen=True)
class Machine:
    """An entry of machines.conf, used to generate ssh config stanzas."""

    key: str
    address: str = ""
    os: OSClass = OSClass.LINUX
    win_user: str = ""
    wsl_user: str = ""


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    file: str | None = None  # Log file path


@dataclass
class SSHConfig:
    """How the client reaches hosts.

    Example settings.yaml:
        ssh:
          connect_timeout: 5
          extra_options: ["-o", "ServerAliveInterval=30"]
    """

    binary: str = "ssh"
    connect_timeout: int = 5  # Seconds; applies to reachability probes only
    extra_options: list[str] = field(default_factory=list)


@dataclass
class RemoteConfig:
    """Where things live on the host side."""

    command: str = "devmux-remote"
    projects_root: str = "~/projects"


@dataclass
class MultiplexerConfig:
    binary: str = "tmux"


@dataclass
class Settings:
    """Root settings object."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ssh: SSHConfig = field(default_factory=SSHConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    multiplexer: MultiplexerConfig = field(default_factory=MultiplexerConfig)
