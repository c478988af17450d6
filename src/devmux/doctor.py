"""Connectivity checks for every configured host. Changes nothing."""

from __future__ import annotations

from collections.abc import Callable

from devmux import ui
from devmux.config.schema import Host, Inventory, OSClass, Settings
from devmux.errors import EXIT_OK, EXIT_REMOTE
from devmux.logging import get_logger
from devmux.remote import Channel, open_channel

log = get_logger("doctor")

PREFIX_SENTINEL = "wsl-ok"


def run_doctor(
    inventory: Inventory,
    settings: Settings | None = None,
    channel_factory: Callable[[Host], Channel] | None = None,
) -> int:
    """Probe each host with a batch-mode ssh call and report OK/FAIL/WARN.

    Local targets count as OK without ssh. A host with a shell prefix also
    gets the prefix exercised; a broken prefix is only a warning.

    Returns:
        0 when every host answered, 2 when any failed.
    """
    settings = settings or Settings()
    if channel_factory is None:
        def channel_factory(host: Host) -> Channel:
            return open_channel(host, ssh=settings.ssh, remote=settings.remote)

    ui.header("devmux doctor")
    ui.info(f"  config: {inventory.source}")

    passed = failed = 0
    for host in inventory.hosts.values():
        if host.is_local:
            ui.ok(f"{host.key} (local)")
            passed += 1
            continue

        channel = channel_factory(host)
        result = channel.probe("echo ok")
        if not result.success:
            ui.fail(f"{host.key} ({host.ssh_target}) ssh")
            log.debug("%s probe: exit=%s %s", host.key, result.exit_code, result.error.strip())
            if host.os is OSClass.WINDOWS_WSL:
                ui.info("      hint: run 'devmux show-key' here and add the key to the")
                ui.info("            Windows administrators_authorized_keys on the host")
            failed += 1
            continue

        ui.ok(f"{host.key} ({host.ssh_target}) ssh")
        passed += 1

        if host.shell_prefix:
            check = channel.probe(f"echo {PREFIX_SENTINEL}", prefixed=True)
            if check.success and PREFIX_SENTINEL in check.output:
                ui.ok(f"{host.key} shell prefix")
            else:
                ui.warn(f"{host.key} shell prefix failed")

    ui.console.print()
    ui.info(f"Summary: OK={passed} FAIL={failed}")
    return EXIT_REMOTE if failed else EXIT_OK
