"""Shared test utilities for devmux tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import NoReturn

from devmux.config.schema import Host, Inventory, Tool
from devmux.terminal.result import ShellResult


def make_result(exit_code: int | None = 0, output: str = "", error: str = "") -> ShellResult:
    """Create a ShellResult with a status matching the exit code."""
    if exit_code is None:
        status = "timeout"
    else:
        status = "ok" if exit_code == 0 else "error"
    return ShellResult(command="", exit_code=exit_code, output=output, error=error, status=status)


class ExecCalled(Exception):
    """Raised by FakeRunner.exec in place of replacing the process."""

    def __init__(self, argv: Sequence[str]) -> None:
        super().__init__(" ".join(argv))
        self.argv = list(argv)


class FakeRunner:
    """Recording CommandRunner that never starts a process.

    Args:
        respond: Maps an argv to the ShellResult returned by run() and
            run_selection(). Defaults to success with no output.
        interactive_code: Exit code returned by run_interactive().
    """

    def __init__(
        self,
        respond: Callable[[list[str]], ShellResult] | None = None,
        interactive_code: int = 0,
    ) -> None:
        self.respond = respond or (lambda argv: make_result())
        self.interactive_code = interactive_code
        self.calls: list[list[str]] = []
        self.inputs: list[str | None] = []
        self.timeouts: list[float | None] = []
        self.interactive: list[list[str]] = []

    def run(
        self,
        argv: Sequence[str],
        timeout: float | None = None,
        input: str | None = None,
        output_limit: int = 1_000_000,
    ) -> ShellResult:
        self.calls.append(list(argv))
        self.inputs.append(input)
        self.timeouts.append(timeout)
        return self.respond(list(argv))

    def run_selection(self, argv: Sequence[str], input: str | None = None) -> ShellResult:
        self.calls.append(list(argv))
        self.inputs.append(input)
        return self.respond(list(argv))

    def run_interactive(self, argv: Sequence[str]) -> int:
        self.interactive.append(list(argv))
        return self.interactive_code

    def exec(self, argv: Sequence[str]) -> NoReturn:
        raise ExecCalled(argv)


def make_inventory(
    hosts: dict[str, str] | None = None,
    tools: dict[str, str] | None = None,
    prefixes: dict[str, str] | None = None,
) -> Inventory:
    """Build an Inventory from {key: ssh_target} and {key: command}."""
    hosts = hosts if hosts is not None else {"home": "home-pc"}
    tools = tools if tools is not None else {"shell": ""}
    prefixes = prefixes or {}
    return Inventory(
        hosts={k: Host(key=k, ssh_target=t, shell_prefix=prefixes.get(k, "")) for k, t in hosts.items()},
        tools={k: Tool(key=k, command=c) for k, c in tools.items()},
    )


SAMPLE_CONF = """\
# devmux inventory
HOSTS=("home" "work")
HOST_home_SSH="home-pc"
HOST_work_SSH="me@work-box"
HOST_work_WSL_PREFIX="wsl.exe -d Ubuntu -- bash -lc"
HOST_work_OS="windows-wsl"

TOOLS=(
    "claude"   # assistant
    "shell"
)
TOOL_claude_CMD="claude --continue"
TOOL_shell_CMD=""
"""
