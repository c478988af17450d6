"""Running external programs.

Every process devmux starts (ssh, tmux, pickers) goes through a
CommandRunner so tests can substitute a recording fake.
"""

from devmux.terminal.executor import SubprocessRunner
from devmux.terminal.protocol import CommandRunner
from devmux.terminal.result import ShellResult

__all__ = [
    "CommandRunner",
    "ShellResult",
    "SubprocessRunner",
]
