"""Pieces shared by the devmux and devmux-remote entry points."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from typing import NoReturn

from devmux import ui
from devmux.errors import EXIT_USAGE, DevmuxError
from devmux.logging import get_logger

log = get_logger("cli")

EXIT_INTERRUPTED = 130


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit 1 like every other local error."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )


def run_guarded(func: Callable[[], int]) -> int:
    """Run ``func`` and turn devmux errors into a diagnostic and exit code."""
    try:
        return func()
    except DevmuxError as e:
        log.debug("%s failed", func.__name__, exc_info=True)
        ui.error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        ui.console.print()
        return EXIT_INTERRUPTED
