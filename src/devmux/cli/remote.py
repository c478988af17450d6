"""Command-line interface for devmux-remote, the host side.

Usage:
    devmux-remote --list-projects [--root DIR]
    devmux-remote --session NAME --tool KEY --cmd CMD [--root DIR] [--new] -- PROJECT
    devmux-remote setup [--only LIST | --skip LIST] [--uninstall LIST]
                        [--dry-run] [--interactive]

Attaching replaces this process with tmux, so a successful session
invocation never returns.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from devmux import __version__
from devmux.cli.common import ArgumentParser, add_verbose, run_guarded
from devmux.config import load_settings
from devmux.errors import EXIT_OK
from devmux.logging import get_logger, setup_logging
from devmux.provision import ALL_FEATURES, run_setup, split_list
from devmux.session import Multiplexer, Orchestrator, SessionMode, list_projects, parse_session_arg

log = get_logger("cli")

DEFAULT_TOOL = "shell"


def create_parser() -> argparse.ArgumentParser:
    """Create the session/listing parser."""
    parser = ArgumentParser(
        prog="devmux-remote",
        description="Attach to or create a devmux tmux session on this host",
        epilog="Run 'devmux-remote setup -h' for host provisioning.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    add_verbose(parser)
    parser.add_argument(
        "--list-projects",
        action="store_true",
        help="Print project directory names, one per line",
    )
    parser.add_argument("--root", help="Projects root (default: ~/projects)")
    parser.add_argument("--session", help="Session name, or 'new'")
    parser.add_argument("--new", action="store_true", help="Start a fresh timestamped session")
    parser.add_argument("--tool", help=f"Tool key, used in the session name (default: {DEFAULT_TOOL})")
    parser.add_argument("--cmd", default="", help="Initial command; empty starts a login shell")
    parser.add_argument("project", nargs="?", help="Project directory under the root")
    return parser


def create_setup_parser() -> argparse.ArgumentParser:
    """Create the parser for the setup sub-command."""
    parser = ArgumentParser(
        prog="devmux-remote setup",
        description="Write devmux managed blocks into ~/.bashrc and tmux.conf",
    )
    add_verbose(parser)
    features = ",".join(ALL_FEATURES)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--all", action="store_true", help="Install all features (default)")
    group.add_argument("--only", metavar="LIST", help=f"Comma-separated subset of {features}")
    parser.add_argument("--skip", metavar="LIST", help="Comma-separated features to skip")
    parser.add_argument("--uninstall", metavar="LIST", help="Remove managed blocks of these features")
    parser.add_argument("--dry-run", action="store_true", help="Show what would change")
    parser.add_argument("--interactive", action="store_true", help="Ask before each feature")
    return parser


def run_setup_cli(args: Sequence[str]) -> int:
    parsed = create_setup_parser().parse_args(args)
    setup_logging(load_settings().logging, parsed.verbose)
    return run_guarded(
        lambda: run_setup(
            only=split_list(parsed.only),
            skip=split_list(parsed.skip),
            uninstall=split_list(parsed.uninstall),
            dry_run=parsed.dry_run,
            interactive=parsed.interactive,
        )
    )


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    if args[:1] == ["setup"]:
        return run_setup_cli(args[1:])

    parser = create_parser()
    parsed = parser.parse_args(args)

    settings = load_settings()
    setup_logging(settings.logging, parsed.verbose)
    root = parsed.root or settings.remote.projects_root

    if parsed.list_projects:
        for name in list_projects(root):
            print(name)
        return EXIT_OK

    if not parsed.project:
        parser.error("PROJECT is required")

    mode, name = parse_session_arg(parsed.session)
    if parsed.new and name is None:
        mode = SessionMode.NEW

    orchestrator = Orchestrator(Multiplexer(settings.multiplexer.binary), projects_root=root)
    return run_guarded(
        lambda: orchestrator.ensure(
            parsed.project,
            parsed.tool or DEFAULT_TOOL,
            command=parsed.cmd,
            mode=mode,
            name=name,
        )
    )


def main() -> int:
    """Main entry point for the devmux-remote CLI."""
    return run_cli(sys.argv[1:])
