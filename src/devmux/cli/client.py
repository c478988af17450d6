"""Command-line interface for the devmux client.

Usage:
    devmux                                  # pick host, project, tool
    devmux --host work --project api --tool claude
    devmux --host home --session new        # fresh session, timestamped
    devmux doctor | ssh-config | show-key
    devmux pick [--multi] PROMPT ITEM...    # picker for shell scripts
"""

from __future__ import annotations

import argparse
import os
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path

from devmux import __version__, ui
from devmux.cli.common import ArgumentParser, add_verbose, run_guarded
from devmux.config import get_inventory_path, load_inventory, load_machines, load_settings
from devmux.config.schema import Settings
from devmux.doctor import run_doctor
from devmux.errors import EXIT_OK
from devmux.keys import copy_to_windows_clipboard, read_public_key
from devmux.logging import get_logger, setup_logging
from devmux.picker import pick_many, pick_one
from devmux.session import Dispatcher, Request
from devmux.sshconfig import generate_ssh_config, write_ssh_config
from devmux.terminal import SubprocessRunner

log = get_logger("cli")

SETTINGS_MENU = ("doctor", "ssh-config", "show-key", "edit config")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = ArgumentParser(
        prog="devmux",
        description="Pick a host, project and tool, then land in a persistent tmux session",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    add_verbose(parser)
    parser.add_argument("--host", help="Host key from devmux.conf")
    parser.add_argument("--project", help="Project directory name on the host")
    parser.add_argument(
        "--session",
        metavar="NAME|new",
        help="Session to attach: 'new' for a fresh one, or an explicit name",
    )
    parser.add_argument("--tool", help="Tool key from devmux.conf")
    parser.add_argument("--settings", action="store_true", help="Open the settings menu")
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Skip the reachability preflight",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Inventory file (default: $XDG_CONFIG_HOME/devmux/devmux.conf)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Maintenance commands")

    subparsers.add_parser("doctor", help="Check that every host is reachable")

    ssh_parser = subparsers.add_parser(
        "ssh-config",
        help="Write Host entries from machines.conf into ~/.ssh/config",
    )
    ssh_parser.add_argument("--machines", type=Path, help="machines.conf path")
    ssh_parser.add_argument("--ssh-config", type=Path, help="ssh config path (default: ~/.ssh/config)")
    ssh_parser.add_argument(
        "--print",
        action="store_true",
        help="Print the generated entries instead of writing them",
    )

    key_parser = subparsers.add_parser("show-key", help="Print your public key as one line")
    key_parser.add_argument("--path", type=Path, help="Public key file")

    pick_parser = subparsers.add_parser(
        "pick",
        help="Choose from ITEMs; the selection is printed on stdout",
    )
    pick_parser.add_argument("--multi", action="store_true", help="Allow several selections")
    pick_parser.add_argument("prompt")
    pick_parser.add_argument("items", nargs="*")

    return parser


def cmd_pick(parsed: argparse.Namespace) -> int:
    if parsed.multi:
        for item in pick_many(parsed.prompt, parsed.items):
            print(item)
    else:
        print(pick_one(parsed.prompt, parsed.items))
    return EXIT_OK


def cmd_ssh_config(parsed: argparse.Namespace) -> int:
    content = generate_ssh_config(load_machines(parsed.machines))
    if parsed.print:
        sys.stdout.write(content)
        return EXIT_OK
    target = write_ssh_config(content, parsed.ssh_config)
    ui.ok(f"Updated {target}")
    return EXIT_OK


def cmd_show_key(parsed: argparse.Namespace) -> int:
    key = read_public_key(parsed.path)
    print(key)
    if copy_to_windows_clipboard(key):
        ui.info("Copied to Windows clipboard.")
    return EXIT_OK


def cmd_edit_config(parsed: argparse.Namespace) -> int:
    path = parsed.config or get_inventory_path()
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"
    return SubprocessRunner().run_interactive([*shlex.split(editor), str(path)])


def cmd_settings(parsed: argparse.Namespace, settings: Settings) -> int:
    choice = pick_one("Settings:", SETTINGS_MENU)
    if choice == "doctor":
        return run_doctor(load_inventory(parsed.config), settings)
    if choice == "ssh-config":
        parsed.machines = parsed.ssh_config = None
        parsed.print = False
        return cmd_ssh_config(parsed)
    if choice == "show-key":
        parsed.path = None
        return cmd_show_key(parsed)
    return cmd_edit_config(parsed)


def cmd_dispatch(parsed: argparse.Namespace, settings: Settings) -> int:
    inventory = load_inventory(parsed.config)
    request = Request(
        host=parsed.host,
        project=parsed.project,
        tool=parsed.tool,
        session=parsed.session,
        fast=parsed.fast,
    )
    return Dispatcher(inventory, settings).run(request)


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    parsed = create_parser().parse_args(args)

    settings = load_settings()
    setup_logging(settings.logging, parsed.verbose)

    def dispatch() -> int:
        if parsed.command == "pick":
            return cmd_pick(parsed)
        if parsed.command == "doctor":
            return run_doctor(load_inventory(parsed.config), settings)
        if parsed.command == "ssh-config":
            return cmd_ssh_config(parsed)
        if parsed.command == "show-key":
            return cmd_show_key(parsed)
        if parsed.settings:
            return cmd_settings(parsed, settings)
        return cmd_dispatch(parsed, settings)

    return run_guarded(dispatch)


def main() -> int:
    """Main entry point for the devmux CLI."""
    return run_cli(sys.argv[1:])
