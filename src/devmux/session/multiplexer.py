"""tmux as the external oracle for session state.

devmux keeps no session records of its own: existence is whatever tmux's
live session table says, queried through session_exists(). Attach and
create hand the terminal over to tmux (exec by default).
"""

from __future__ import annotations

import os
import shutil
from typing import NoReturn

from devmux.errors import RemoteExecutionError
from devmux.logging import get_logger
from devmux.session.naming import multiplexer_name
from devmux.terminal import CommandRunner, SubprocessRunner

log = get_logger("tmux")


def _target(name: str) -> str:
    # "=" forces an exact match; plain -t also matches prefixes
    return f"={multiplexer_name(name)}"


class Multiplexer:
    """Thin wrapper over the tmux binary."""

    def __init__(self, binary: str = "tmux", runner: CommandRunner | None = None) -> None:
        self.binary = binary
        self.runner = runner or SubprocessRunner()

    def available(self) -> bool:
        return shutil.which(self.binary) is not None

    def require(self) -> None:
        if not self.available():
            raise RemoteExecutionError(f"{self.binary} not found on this host")

    @staticmethod
    def inside() -> bool:
        """True when running inside a tmux client already."""
        return bool(os.environ.get("TMUX"))

    def session_exists(self, name: str) -> bool:
        result = self.runner.run([self.binary, "has-session", "-t", _target(name)])
        return result.success

    def attach(self, name: str) -> NoReturn:
        """Hand this terminal to an existing session."""
        if self.inside():
            argv = [self.binary, "switch-client", "-t", _target(name)]
        else:
            argv = [self.binary, "attach-session", "-t", _target(name)]
        log.info("Attaching to %s", name)
        self.runner.exec(argv)

    def create_session(self, name: str, cwd: str, command: str = "") -> NoReturn:
        """Create a session rooted at ``cwd`` running ``command`` and attach.

        An empty command starts tmux's default shell.
        """
        mux_name = multiplexer_name(name)
        if self.inside():
            # Nested attach is refused by tmux: create detached, then switch
            argv = [self.binary, "new-session", "-d", "-s", mux_name, "-c", cwd]
            if command:
                argv.append(command)
            result = self.runner.run(argv)
            if not result.success:
                raise RemoteExecutionError(
                    f"tmux new-session failed: {result.error.strip() or result.exit_code}"
                )
            self.attach(name)
        argv = [self.binary, "new-session", "-s", mux_name, "-c", cwd]
        if command:
            argv.append(command)
        log.info("Creating session %s in %s", name, cwd)
        self.runner.exec(argv)
