"""Subprocess-based command runner."""

from __future__ import annotations

import os
import shlex
import subprocess
import time
from collections.abc import Sequence
from typing import NoReturn

from devmux.logging import TRACE, get_logger
from devmux.terminal.result import ShellResult

log = get_logger("terminal")


class SubprocessRunner:
    """Run external commands with the subprocess module.

    Everything is synchronous: devmux runs one sequential control flow per
    invocation.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        """Initialize the runner.

        Args:
            env: Additional environment variables for every command.
        """
        self._env = env

    def _environ(self) -> dict[str, str] | None:
        if not self._env:
            return None
        process_env = os.environ.copy()
        process_env.update(self._env)
        return process_env

    def run(
        self,
        argv: Sequence[str],
        timeout: float | None = None,
        input: str | None = None,
        output_limit: int = 1_000_000,
    ) -> ShellResult:
        """Run a command and capture its output.

        Args:
            argv: Program and arguments.
            timeout: Seconds before the process is killed. None waits forever.
            input: Text fed to stdin. Without it stdin is /dev/null so the
                child can never block on a prompt.
            output_limit: Maximum characters of stdout to keep.

        Returns:
            ShellResult; a missing program yields exit code 127.
        """
        start_time = time.perf_counter()
        full_command = shlex.join(argv)
        log.log(TRACE, "run: %s", full_command)

        try:
            proc = subprocess.run(
                list(argv),
                input=input,
                stdin=None if input is not None else subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
                env=self._environ(),
            )
        except subprocess.TimeoutExpired:
            return ShellResult(
                command=full_command,
                exit_code=None,
                output="",
                error=f"Command timed out after {timeout}s",
                status="timeout",
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
        except FileNotFoundError:
            return ShellResult(
                command=full_command,
                exit_code=127,
                output="",
                error=f"Command not found: {argv[0]}",
                status="error",
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
        except PermissionError:
            return ShellResult(
                command=full_command,
                exit_code=126,
                output="",
                error=f"Permission denied: {argv[0]}",
                status="error",
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        output = proc.stdout or ""
        truncated = len(output) > output_limit
        if truncated:
            output = output[:output_limit]

        return ShellResult(
            command=full_command,
            exit_code=proc.returncode,
            output=output,
            error=proc.stderr or "",
            truncated=truncated,
            status="ok" if proc.returncode == 0 else "error",
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    def run_selection(self, argv: Sequence[str], input: str | None = None) -> ShellResult:
        """Run a chooser program whose stdout carries the selection.

        Stderr stays on the terminal so the chooser can draw its UI there;
        stdin is the item list when given, the terminal otherwise.
        """
        full_command = shlex.join(argv)
        log.log(TRACE, "select: %s", full_command)
        try:
            proc = subprocess.run(
                list(argv),
                input=input,
                stdout=subprocess.PIPE,
                text=True,
                env=self._environ(),
            )
        except OSError as e:
            return ShellResult(
                command=full_command, exit_code=127, output="", error=str(e), status="error"
            )
        return ShellResult(
            command=full_command,
            exit_code=proc.returncode,
            output=proc.stdout or "",
            status="ok" if proc.returncode == 0 else "error",
        )

    def run_interactive(self, argv: Sequence[str]) -> int:
        """Run a command on this terminal; blocks until it exits.

        Interrupts reach the child through the terminal's process group.
        """
        log.debug("interactive: %s", shlex.join(argv))
        try:
            return subprocess.run(list(argv), check=False, env=self._environ()).returncode
        except FileNotFoundError:
            log.error("Command not found: %s", argv[0])
            return 127

    def exec(self, argv: Sequence[str]) -> NoReturn:
        """Replace this process with the command (blocking hand-off)."""
        log.debug("exec: %s", shlex.join(argv))
        env = self._environ()
        if env is None:
            os.execvp(argv[0], list(argv))
        os.execvpe(argv[0], list(argv), env)
