"""Remote-execution channel.

A channel runs one command line on a host and reports stdout, stderr and the
exit code, either captured or attached to this terminal. ssh is the normal
binding; hosts whose target is ``local``/``localhost`` run through bash
directly.

Commands for hosts with a shell prefix (e.g. ``wsl.exe -d Ubuntu -- bash
-lc``) are passed to the prefix as one double-quoted argument, the way the
landing shell on a Windows host expects them.
"""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod

from devmux.config.schema import Host, RemoteConfig, SSHConfig
from devmux.errors import RemoteUnreachableError
from devmux.logging import get_logger
from devmux.terminal import CommandRunner, ShellResult, SubprocessRunner

log = get_logger("remote")

# ssh's own exit status for connection and authentication failures
SSH_CONNECT_FAILURE = 255

# Extra seconds granted to a probe over ssh's ConnectTimeout
_PROBE_GRACE = 5


def wrap_prefix(prefix: str, command: str) -> str:
    """Wrap ``command`` for a host's shell prefix; no prefix returns it as is."""
    if not prefix:
        return command
    escaped = command.replace('"', '\\"')
    return f'{prefix} "{escaped}"'


def remote_argv(remote: RemoteConfig, *args: str) -> str:
    """Build the quoted devmux-remote command line."""
    return shlex.join([remote.command, *args])


class Channel(ABC):
    """Base channel bound to one host."""

    def __init__(
        self,
        host: Host,
        ssh: SSHConfig | None = None,
        remote: RemoteConfig | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.host = host
        self.ssh = ssh or SSHConfig()
        self.remote = remote or RemoteConfig()
        self.runner = runner or SubprocessRunner()

    @property
    def label(self) -> str:
        return f"{self.host.key} ({self.host.ssh_target})"

    @abstractmethod
    def _argv(self, command: str, tty: bool = False) -> list[str]:
        """Process argv that runs ``command`` on the host."""

    def _probe_argv(self, command: str) -> list[str]:
        return self._argv(command)

    def _check(self, result: ShellResult) -> ShellResult:
        return result

    def run(self, command: str, timeout: float | None = None) -> ShellResult:
        """Run ``command`` on the host with output captured."""
        wrapped = wrap_prefix(self.host.shell_prefix, command)
        return self._check(self.runner.run(self._argv(wrapped), timeout=timeout))

    def run_interactive(self, command: str) -> int:
        """Run ``command`` on the host attached to this terminal."""
        wrapped = wrap_prefix(self.host.shell_prefix, command)
        code = self.runner.run_interactive(self._argv(wrapped, tty=True))
        if code == SSH_CONNECT_FAILURE and not self.host.is_local:
            raise RemoteUnreachableError(f"Cannot connect to {self.label}")
        return code

    def probe(self, command: str = "true", prefixed: bool = False) -> ShellResult:
        """Cheap reachability check that never prompts for a password."""
        if prefixed:
            command = wrap_prefix(self.host.shell_prefix, command)
        return self.runner.run(
            self._probe_argv(command),
            timeout=self.ssh.connect_timeout + _PROBE_GRACE,
        )

    def list_projects(self, root: str | None = None) -> ShellResult:
        args = ["--list-projects"]
        if root:
            args += ["--root", root]
        return self.run(remote_argv(self.remote, *args))


class SSHChannel(Channel):
    """Channel over the ssh binary."""

    def _argv(self, command: str, tty: bool = False) -> list[str]:
        argv = [self.ssh.binary]
        if tty:
            argv.append("-t")
        argv += [*self.ssh.extra_options, self.host.ssh_target, command]
        return argv

    def _probe_argv(self, command: str) -> list[str]:
        return [
            self.ssh.binary,
            "-o", "BatchMode=yes",
            "-o", f"ConnectTimeout={self.ssh.connect_timeout}",
            *self.ssh.extra_options,
            self.host.ssh_target,
            command,
        ]

    def _check(self, result: ShellResult) -> ShellResult:
        if result.exit_code == SSH_CONNECT_FAILURE:
            detail = result.error.strip().splitlines()
            reason = detail[-1] if detail else "connection failed"
            raise RemoteUnreachableError(f"Cannot connect to {self.label}: {reason}")
        return result


class LocalChannel(Channel):
    """Channel for the machine we are running on."""

    def _argv(self, command: str, tty: bool = False) -> list[str]:
        return ["bash", "-lc", command]


def open_channel(
    host: Host,
    ssh: SSHConfig | None = None,
    remote: RemoteConfig | None = None,
    runner: CommandRunner | None = None,
) -> Channel:
    """Pick the channel type for a host."""
    cls = LocalChannel if host.is_local else SSHChannel
    log.debug("Opening %s for %s", cls.__name__, host.key)
    return cls(host, ssh=ssh, remote=remote, runner=runner)


def ensure_reachable(channel: Channel) -> None:
    """Preflight: raise RemoteUnreachableError unless the host answers."""
    if channel.host.is_local:
        return
    result = channel.probe()
    if result.success:
        return
    if result.status == "timeout":
        raise RemoteUnreachableError(f"Timed out connecting to {channel.label}")
    detail = result.error.strip().splitlines()
    reason = detail[-1] if detail else f"exit {result.exit_code}"
    raise RemoteUnreachableError(f"Cannot reach {channel.label}: {reason}")


__all__ = [
    "Channel",
    "LocalChannel",
    "SSHChannel",
    "ensure_reachable",
    "open_channel",
    "remote_argv",
    "wrap_prefix",
]
