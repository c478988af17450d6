"""SSH client config generation from machines.conf.

Each machine with an address becomes a ``Host`` stanza inside the
``devmux-managed`` block of ``~/.ssh/config``; hand-written stanzas outside
the block are preserved. The file is always left at mode 0600, which ssh
insists on.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from devmux import blocks
from devmux.config.schema import Machine, OSClass
from devmux.logging import get_logger

log = get_logger("sshconfig")

NAMESPACE = "devmux"


def default_ssh_config_path() -> Path:
    return Path.home() / ".ssh" / "config"


def ssh_user(machine: Machine) -> str:
    """Login user for a machine.

    Windows hosts land on Windows, so they use the Windows account; Linux
    and Termux hosts use the WSL/Linux account.
    """
    if machine.os in (OSClass.LINUX, OSClass.TERMUX):
        return machine.wsl_user
    return machine.win_user


def generate_ssh_config(machines: Iterable[Machine]) -> str:
    """Render Host stanzas; machines without an address are skipped."""
    stanzas: list[str] = []
    for machine in machines:
        if not machine.address:
            log.debug("Skipping %s: no address", machine.key)
            continue
        lines = [f"Host {machine.key}", f"    HostName {machine.address}"]
        user = ssh_user(machine)
        if user:
            lines.append(f"    User {user}")
        stanzas.append("\n".join(lines) + "\n")
    return "\n".join(stanzas)


def write_ssh_config(content: str, path: Path | None = None) -> Path:
    """Replace the managed block of the ssh config with ``content``."""
    target = path or default_ssh_config_path()
    blocks.write_block(target, NAMESPACE, None, content, private=True)
    log.info("Wrote managed block to %s", target)
    return target
