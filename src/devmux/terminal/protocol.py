"""Runner protocol for launching external programs (ssh, tmux, gum, ...)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn, Protocol

from devmux.terminal.result import ShellResult


class CommandRunner(Protocol):
    """Protocol for running external commands.

    Implementations:
    - SubprocessRunner: real processes
    - tests provide recording fakes
    """

    def run(
        self,
        argv: Sequence[str],
        timeout: float | None = None,
        input: str | None = None,
        output_limit: int = 1_000_000,
    ) -> ShellResult:
        """Run a command with stdout/stderr captured."""
        ...

    def run_selection(self, argv: Sequence[str], input: str | None = None) -> ShellResult:
        """Run a full-screen chooser: stdout captured, the terminal left to the UI."""
        ...

    def run_interactive(self, argv: Sequence[str]) -> int:
        """Run a command attached to this terminal and return its exit code."""
        ...

    def exec(self, argv: Sequence[str]) -> NoReturn:
        """Replace the current process with the command."""
        ...
